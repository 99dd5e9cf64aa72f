"""Property tests: concurrent dispatches never observe each other's environment."""

from __future__ import annotations

import asyncio
import random

from hypothesis import given, settings

from mp_commandkit.application.commands import Context, MiddlewareContext, define_command, define_middleware
from mp_commandkit.application.dispatcher import Dispatcher
from mp_commandkit.config import DispatchSettings
from mp_commandkit.context import after, use_environment
from mp_commandkit.testing import StaticCommandLoader, make_interaction, sentinel_batch_strategy


def probe_dispatcher(observed_after: list[tuple[str, str]]) -> Dispatcher:
    async def probe(ctx: Context) -> str:
        sentinel = ctx.options.get_string("sentinel", required=True)
        env = use_environment()
        env.variables["sentinel"] = sentinel
        after(lambda e: observed_after.append((sentinel, e.variables["sentinel"])))
        await asyncio.sleep(random.random() / 1000)  # noqa: S311
        await asyncio.sleep(0)
        return use_environment().variables["sentinel"]

    async def check(ctx: MiddlewareContext) -> None:
        await asyncio.sleep(0)
        assert ctx.environment is use_environment()

    dispatcher = Dispatcher(
        DispatchSettings(disable_permissions_middleware=True),
        loader=StaticCommandLoader(
            [define_command("probe", chat_input=probe, middlewares=("check",))],
            [define_middleware("check", id="check", before=check, after=check)],
        ),
    )
    asyncio.run(dispatcher.load_commands())
    return dispatcher


class TestEnvironmentIsolation:
    @settings(max_examples=25, deadline=None)
    @given(sentinel_batch_strategy())
    def test_each_dispatch_sees_only_its_own_sentinel(self, sentinels: list[str]) -> None:
        observed_after: list[tuple[str, str]] = []
        dispatcher = probe_dispatcher(observed_after)

        async def main() -> list[str]:
            return await asyncio.gather(
                *(
                    dispatcher.handle_interaction(make_interaction("probe", options={"sentinel": s}))
                    for s in sentinels
                )
            )

        assert asyncio.run(main()) == sentinels
        assert sorted(observed_after) == sorted((s, s) for s in sentinels)
