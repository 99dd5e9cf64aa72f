"""Application resolver – maps an inbound request to a command and its middlewares."""
from __future__ import annotations

import dataclasses
import inspect
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Awaitable, Callable

from mp_commandkit.application.commands import (
    LoadedCommand,
    LoadedMiddleware,
    Message,
    MessageCommandParser,
    OptionType,
    Request,
    ResolvedCommand,
)
from mp_commandkit.application.pipeline.middlewares import permissions_middleware
from mp_commandkit.application.resolver.loader import CommandLoader, LoaderData
from mp_commandkit.config import DispatchSettings
from mp_commandkit.kernel.signals import InvalidPrefix
from mp_commandkit.observability.logging import get_logger

_log = get_logger(__name__)

PrefixResult = str | Sequence[str] | re.Pattern[str]
PrefixProvider = Callable[[Message], Awaitable[PrefixResult] | PrefixResult]


@dataclasses.dataclass(frozen=True)
class _Tables:
    commands: Mapping[str, LoadedCommand]
    middlewares: Mapping[str, LoadedMiddleware]
    name_to_id: Mapping[str, str]
    alias_to_id: Mapping[str, str]

    @classmethod
    def build(
        cls,
        commands: Iterable[LoadedCommand],
        middlewares: Iterable[LoadedMiddleware],
    ) -> "_Tables":
        by_id: dict[str, LoadedCommand] = {}
        name_to_id: dict[str, str] = {}
        alias_to_id: dict[str, str] = {}
        for loaded in commands:
            previous = name_to_id.get(loaded.name)
            if previous is not None and previous != loaded.command.id:
                _log.warning("resolver.duplicate_command", command=loaded.name)
            by_id[loaded.command.id] = loaded
            name_to_id[loaded.name] = loaded.command.id
            for alias in loaded.command.aliases:
                alias_to_id[alias] = loaded.command.id
        return cls(
            commands=by_id,
            middlewares={mw.id: mw for mw in middlewares},
            name_to_id=name_to_id,
            alias_to_id=alias_to_id,
        )

    def lookup(self, name: str) -> LoadedCommand | None:
        command_id = self.name_to_id.get(name) or self.alias_to_id.get(name)
        if command_id is None:
            return None
        return self.commands.get(command_id)


class CommandResolver:
    """Resolves requests against the loaded command and middleware tables.

    The tables are replaced wholesale on :meth:`load` / :meth:`reload`; a
    dispatch already in flight keeps the snapshot it resolved against.

    Resolution never raises for "not found": every miss, invalid prefix or
    scope mismatch yields ``None``.
    """

    def __init__(
        self,
        settings: DispatchSettings,
        *,
        loader: CommandLoader | None = None,
        prefix_provider: PrefixProvider | None = None,
    ) -> None:
        self._settings = settings
        self._loader = loader
        self._prefix_provider = prefix_provider
        self._tables = _Tables.build((), ())
        self._parse_warning_emitted = False

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load the tables from the configured loader."""
        if self._loader is None:
            return
        self._apply(await self._fetch(self._loader))

    async def reload(self) -> None:
        """Replace every table (external registrations included) with fresh loader data.

        The current tables stay in place until the loader returned, so
        requests resolved while it is fetching still see the old commands.
        """
        data = await self._fetch(self._loader) if self._loader is not None else LoaderData()
        self._apply(data)

    @staticmethod
    async def _fetch(loader: CommandLoader) -> LoaderData:
        data = loader.get_data()
        if inspect.isawaitable(data):
            data = await data
        return data

    def _apply(self, data: LoaderData) -> None:
        self._tables = _Tables.build(data.commands.values(), data.middlewares.values())
        _log.info(
            "resolver.loaded",
            commands=len(self._tables.commands),
            middlewares=len(self._tables.middlewares),
        )

    def register_loaded_commands(self, commands: Iterable[LoadedCommand]) -> None:
        tables = self._tables
        self._tables = _Tables.build(
            [*tables.commands.values(), *commands], tables.middlewares.values()
        )

    def register_loaded_middlewares(self, middlewares: Iterable[LoadedMiddleware]) -> None:
        tables = self._tables
        self._tables = _Tables.build(
            tables.commands.values(), [*tables.middlewares.values(), *middlewares]
        )

    def get_commands(self) -> list[LoadedCommand]:
        return list(self._tables.commands.values())

    def get_middlewares(self) -> list[LoadedMiddleware]:
        return list(self._tables.middlewares.values())

    def get_command(self, name: str) -> LoadedCommand | None:
        """Look up a command by name or alias."""
        return self._tables.lookup(name)

    def resolve_message_command_name(self, name: str) -> str:
        """Return the canonical name for *name* (which may be an alias)."""
        loaded = self._tables.lookup(name)
        return loaded.name if loaded is not None else name

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def prepare_command_run(
        self,
        source: Request,
        command_name: str | None = None,
    ) -> ResolvedCommand | None:
        """Resolve *source* (or *command_name* for the same source)."""
        tables = self._tables
        parser: MessageCommandParser | None = None

        if isinstance(source, Message):
            if self._settings.ignore_bots and source.author_is_bot:
                return None
            try:
                prefixes = await self._get_prefixes(source)
                parser = MessageCommandParser(
                    source,
                    prefixes,
                    lambda path: self._schema_for(tables, source, path),
                )
                if command_name is None:
                    command_name = parser.get_command()
            except InvalidPrefix:
                return None
            except Exception as exc:  # noqa: BLE001
                self._warn_parse_failure(exc)
                return None
        elif command_name is None:
            if not source.is_command_like:
                return None
            command_name = source.command_name

        if not command_name:
            return None

        loaded = tables.lookup(command_name)
        if loaded is None:
            return None

        if not self._in_scope(loaded, source.guild_id):
            return None

        middlewares: list[LoadedMiddleware] = []
        for middleware_id in loaded.command.middlewares:
            middleware = tables.middlewares.get(middleware_id)
            if middleware is not None:
                middlewares.append(middleware)
        if not self._settings.disable_permissions_middleware:
            middlewares.append(permissions_middleware)

        return ResolvedCommand(command=loaded, middlewares=tuple(middlewares), parser=parser)

    @staticmethod
    def _in_scope(loaded: LoadedCommand, guild_id: str | None) -> bool:
        return not (guild_id and loaded.guilds and guild_id not in loaded.guilds)

    def _schema_for(
        self, tables: _Tables, source: Message, path: str
    ) -> Mapping[str, OptionType]:
        name = path.split(" ", 1)[0]
        loaded = tables.lookup(name)
        if loaded is None or not self._in_scope(loaded, source.guild_id):
            return {}
        return loaded.definition.options

    async def _get_prefixes(self, message: Message) -> Sequence[str] | re.Pattern[str]:
        if self._prefix_provider is None:
            return [self._settings.default_prefix]
        prefix = self._prefix_provider(message)
        if inspect.isawaitable(prefix):
            prefix = await prefix
        if isinstance(prefix, (str, re.Pattern)):
            return [prefix] if isinstance(prefix, str) else prefix
        return list(prefix)

    def _warn_parse_failure(self, exc: BaseException) -> None:
        if not self._settings.development or self._parse_warning_emitted:
            return
        self._parse_warning_emitted = True
        _log.warning("resolver.message_parse_failed", error=repr(exc))


__all__ = ["CommandResolver", "PrefixProvider", "PrefixResult"]
