"""Testing fakes – StaticCommandLoader."""
from __future__ import annotations

from collections.abc import Iterable

from mp_commandkit.application.commands import LoadedCommand, LoadedMiddleware
from mp_commandkit.application.resolver import LoaderData


class StaticCommandLoader:
    """Loader serving a fixed set of commands and middlewares.

    :meth:`replace` swaps the served tables, which lets tests exercise
    ``reload_commands``.
    """

    def __init__(
        self,
        commands: Iterable[LoadedCommand] = (),
        middlewares: Iterable[LoadedMiddleware] = (),
    ) -> None:
        self.calls = 0
        self.replace(commands, middlewares)

    def replace(
        self,
        commands: Iterable[LoadedCommand] = (),
        middlewares: Iterable[LoadedMiddleware] = (),
    ) -> None:
        self._data = LoaderData(
            commands={c.command.id: c for c in commands},
            middlewares={m.id: m for m in middlewares},
        )

    async def get_data(self) -> LoaderData:
        self.calls += 1
        return self._data


__all__ = ["StaticCommandLoader"]
