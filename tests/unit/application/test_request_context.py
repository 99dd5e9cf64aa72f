"""Unit tests for Context and MiddlewareContext."""

from __future__ import annotations

import asyncio

import pytest

from mp_commandkit.application.commands import (
    Context,
    ContextParameters,
    ExecutionMode,
    MiddlewareContext,
    OptionType,
    define_command,
)
from mp_commandkit.application.resolver import CommandResolver
from mp_commandkit.config import DispatchSettings
from mp_commandkit.context import ExecutionEnvironment, provide_context
from mp_commandkit.kernel.errors import CommandNotFoundError, DispatchError, MissingHandlerError
from mp_commandkit.kernel.signals import DMOnly, ForwardedCommand, GuildOnly
from mp_commandkit.testing import RecordingResponder, make_interaction, make_message


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def noop(ctx: Context) -> None:
    return None


def make_resolver(*commands: object) -> CommandResolver:
    resolver = CommandResolver(DispatchSettings(disable_permissions_middleware=True))
    resolver.register_loaded_commands(commands)  # type: ignore[arg-type]
    return resolver


def interaction_context(resolver: CommandResolver, command_name: str = "ping", **kwargs: object) -> MiddlewareContext:
    loaded = resolver.get_command(command_name)
    assert loaded is not None
    interaction = make_interaction(command_name, **kwargs)  # type: ignore[arg-type]
    return MiddlewareContext(
        resolver,
        ContextParameters(
            command=loaded,
            execution_mode=ExecutionMode.CHAT_INPUT,
            interaction=interaction,
            environment=ExecutionEnvironment(),
        ),
    )


# ---------------------------------------------------------------------------
# Construction and identity
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_requires_exactly_one_request(self) -> None:
        resolver = make_resolver(define_command("ping", chat_input=noop))
        loaded = resolver.get_command("ping")
        assert loaded is not None
        with pytest.raises(DispatchError):
            Context(resolver, ContextParameters(command=loaded, execution_mode=ExecutionMode.CHAT_INPUT))
        with pytest.raises(DispatchError):
            Context(
                resolver,
                ContextParameters(
                    command=loaded,
                    execution_mode=ExecutionMode.CHAT_INPUT,
                    interaction=make_interaction("ping"),
                    message=make_message("!ping"),
                ),
            )

    def test_mode_queries(self) -> None:
        ctx = interaction_context(make_resolver(define_command("ping", chat_input=noop)))
        assert ctx.is_interaction()
        assert ctx.is_chat_input_command()
        assert not ctx.is_message()
        assert not ctx.is_autocomplete()
        assert ctx.is_middleware()
        assert not ctx.clone().is_middleware()

    def test_identity(self) -> None:
        ctx = interaction_context(make_resolver(define_command("ping", chat_input=noop)))
        assert ctx.command_name == "ping"
        assert ctx.get_command_identifier() == "ping"
        assert ctx.guild_id == "guild-1"
        assert ctx.channel_id == "channel-1"
        assert ctx.forwarded is False


class TestMessageContext:
    def test_alias_resolves_to_canonical_name(self) -> None:
        resolver = make_resolver(
            define_command("ping", message=noop, aliases=("p",), options={"n": OptionType.INTEGER})
        )
        resolved = asyncio.run(resolver.prepare_command_run(make_message("!p n:4 extra")))
        assert resolved is not None
        ctx = Context(
            resolver,
            ContextParameters(
                command=resolved.command,
                execution_mode=ExecutionMode.MESSAGE,
                message=make_message("!p n:4 extra"),
                parser=resolved.parser,
            ),
        )
        assert ctx.command_name == "ping"
        assert ctx.invoked_command_name == "p"
        assert ctx.options.get_integer("n") == 4
        assert ctx.args() == ["n:4", "extra"]

    def test_interaction_options_never_touch_parser(self) -> None:
        ctx = interaction_context(
            make_resolver(define_command("ping", chat_input=noop)), options={"n": 1}
        )
        assert ctx.options.get("n") == 1
        assert ctx.args() == []


# ---------------------------------------------------------------------------
# Scope helpers, cancellation, store
# ---------------------------------------------------------------------------


class TestScopeAndCancel:
    def test_ensure_guild(self) -> None:
        resolver = make_resolver(define_command("ping", chat_input=noop))
        interaction_context(resolver).ensure_guild()
        with pytest.raises(GuildOnly):
            interaction_context(resolver, guild_id=None).ensure_guild()

    def test_ensure_dm(self) -> None:
        resolver = make_resolver(define_command("ping", chat_input=noop))
        interaction_context(resolver, guild_id=None).ensure_dm()
        with pytest.raises(DMOnly):
            interaction_context(resolver).ensure_dm()

    def test_cancel_is_one_way_flag(self) -> None:
        ctx = interaction_context(make_resolver(define_command("ping", chat_input=noop)))
        assert ctx.cancelled is False
        ctx.cancel()
        ctx.cancel()
        assert ctx.cancelled is True

    def test_clone_shares_store(self) -> None:
        ctx = interaction_context(make_resolver(define_command("ping", chat_input=noop)))
        ctx.store["k"] = "v"
        assert ctx.clone().store["k"] == "v"

    def test_reply_goes_through_responder(self) -> None:
        responder = RecordingResponder()
        ctx = interaction_context(
            make_resolver(define_command("ping", chat_input=noop)), responder=responder
        )
        asyncio.run(ctx.reply("hello", ephemeral=True))
        assert responder.replies[0].content == "hello"
        assert responder.replies[0].ephemeral is True


# ---------------------------------------------------------------------------
# Forwarding
# ---------------------------------------------------------------------------


class TestForwardCommand:
    def _forward(self, ctx: MiddlewareContext, target: str) -> None:
        env = ctx.environment
        assert env is not None
        env.variables["exec_handler_kind"] = ExecutionMode.CHAT_INPUT.value

        async def body() -> None:
            await ctx.forward_command(target)

        asyncio.run(provide_context(env, body))

    def test_runs_target_handler_once_then_raises(self) -> None:
        calls: list[tuple[str, bool]] = []

        async def pong(ctx: Context) -> None:
            calls.append((ctx.command.name, ctx.forwarded))

        resolver = make_resolver(
            define_command("ping", chat_input=noop), define_command("pong", chat_input=pong)
        )
        ctx = interaction_context(resolver)
        with pytest.raises(ForwardedCommand):
            self._forward(ctx, "pong")
        assert calls == [("pong", True)]
        assert ctx.environment is not None
        assert ctx.environment.variables["forwarded_by"] == "ping"
        assert ctx.environment.variables["forwarded_to"] == "pong"

    def test_unknown_target(self) -> None:
        ctx = interaction_context(make_resolver(define_command("ping", chat_input=noop)))
        with pytest.raises(CommandNotFoundError):
            self._forward(ctx, "nope")

    def test_target_without_handler_for_mode(self) -> None:
        resolver = make_resolver(
            define_command("ping", chat_input=noop), define_command("text", message=noop)
        )
        ctx = interaction_context(resolver)
        with pytest.raises(MissingHandlerError):
            self._forward(ctx, "text")
