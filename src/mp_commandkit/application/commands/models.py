"""Application commands – loaded command and middleware data model."""
from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from mp_commandkit.kernel.errors import DispatchError, UnknownExecutionModeError

if TYPE_CHECKING:
    from mp_commandkit.application.commands.context import Context, MiddlewareContext
    from mp_commandkit.application.commands.parser import MessageCommandParser

Handler = Callable[["Context"], Awaitable[Any] | Any]
MiddlewareFunction = Callable[["MiddlewareContext"], Awaitable[Any] | Any]


class ExecutionMode(str, Enum):
    """Shape of the inbound request a handler is written for."""

    CHAT_INPUT = "chat_input"
    AUTOCOMPLETE = "autocomplete"
    MESSAGE = "message"
    MESSAGE_CONTEXT_MENU = "message_context_menu"
    USER_CONTEXT_MENU = "user_context_menu"
    AI = "ai"

    @classmethod
    def parse(cls, value: "ExecutionMode | str") -> "ExecutionMode":
        """Return the member for *value* or raise :class:`UnknownExecutionModeError`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownExecutionModeError(value, cause=exc) from exc


INTERACTION_MODES: frozenset[ExecutionMode] = frozenset(
    {
        ExecutionMode.CHAT_INPUT,
        ExecutionMode.AUTOCOMPLETE,
        ExecutionMode.MESSAGE_CONTEXT_MENU,
        ExecutionMode.USER_CONTEXT_MENU,
    }
)


class OptionType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    USER = "user"
    CHANNEL = "channel"
    ROLE = "role"
    ATTACHMENT = "attachment"


@dataclasses.dataclass(frozen=True)
class CommandDefinition:
    """Declared shape of a command: its name and typed option schema."""

    name: str
    description: str = ""
    options: Mapping[str, OptionType] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class CommandMetadata:
    """Declared requirements checked by the built-in middlewares."""

    user_permissions: tuple[str, ...] = ()
    bot_permissions: tuple[str, ...] = ()
    guild_only: bool = False
    dm_only: bool = False


@dataclasses.dataclass(frozen=True)
class Command:
    """Routing identity of a command as supplied by the loader."""

    id: str
    name: str
    category: str | None = None
    aliases: tuple[str, ...] = ()
    middlewares: tuple[str, ...] = ()
    path: str | None = None


@dataclasses.dataclass(frozen=True)
class LoadedCommand:
    """A command ready for dispatch: identity, handlers and declared metadata.

    Handler keys are normalised to :class:`ExecutionMode`; an unknown key is
    rejected here rather than at invocation time.
    """

    command: Command
    definition: CommandDefinition
    handlers: Mapping[ExecutionMode, Handler]
    metadata: CommandMetadata = dataclasses.field(default_factory=CommandMetadata)
    guilds: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        handlers = {ExecutionMode.parse(mode): fn for mode, fn in self.handlers.items() if fn}
        if not handlers:
            raise DispatchError(
                f"Command '{self.command.name}' must provide at least one handler function"
            )
        for mode, fn in handlers.items():
            if not callable(fn):
                raise DispatchError(
                    f"Command '{self.command.name}': handler for '{mode.value}' is not callable"
                )
        object.__setattr__(self, "handlers", MappingProxyType(handlers))

    @property
    def name(self) -> str:
        return self.command.name

    def handler_for(self, mode: ExecutionMode) -> Handler | None:
        return self.handlers.get(mode)


@dataclasses.dataclass(frozen=True)
class Middleware:
    """Routing identity of a middleware as supplied by the loader."""

    id: str
    name: str
    path: str | None = None


@dataclasses.dataclass(frozen=True)
class LoadedMiddleware:
    """A middleware with its optional before- and after-phase functions."""

    middleware: Middleware
    before_execute: MiddlewareFunction | None = None
    after_execute: MiddlewareFunction | None = None

    def __post_init__(self) -> None:
        if self.before_execute is None and self.after_execute is None:
            raise DispatchError(
                f"Middleware '{self.middleware.name}' must provide at least one handler function"
            )

    @property
    def id(self) -> str:
        return self.middleware.id

    @classmethod
    def from_object(cls, obj: Any, *, id: str | None = None, name: str | None = None) -> "LoadedMiddleware":  # noqa: A002
        """Build from any object exposing ``before_execute`` / ``after_execute``."""
        return cls(
            middleware=Middleware(
                id=id or uuid.uuid4().hex,
                name=name or type(obj).__name__,
            ),
            before_execute=getattr(obj, "before_execute", None),
            after_execute=getattr(obj, "after_execute", None),
        )


@dataclasses.dataclass(frozen=True)
class ResolvedCommand:
    """Outcome of resolution: the command and its ordered middleware chain."""

    command: LoadedCommand
    middlewares: tuple[LoadedMiddleware, ...] = ()
    parser: "MessageCommandParser | None" = None


def define_command(
    name: str,
    *,
    chat_input: Handler | None = None,
    autocomplete: Handler | None = None,
    message: Handler | None = None,
    message_context_menu: Handler | None = None,
    user_context_menu: Handler | None = None,
    ai: Handler | None = None,
    id: str | None = None,  # noqa: A002
    description: str = "",
    options: Mapping[str, OptionType] | None = None,
    aliases: tuple[str, ...] = (),
    middlewares: tuple[str, ...] = (),
    guilds: tuple[str, ...] = (),
    metadata: CommandMetadata | None = None,
    category: str | None = None,
) -> LoadedCommand:
    """Convenience builder for a :class:`LoadedCommand`.

    Usage::

        ping = define_command("ping", chat_input=ping_handler, message=ping_handler)
    """
    handlers = {
        ExecutionMode.CHAT_INPUT: chat_input,
        ExecutionMode.AUTOCOMPLETE: autocomplete,
        ExecutionMode.MESSAGE: message,
        ExecutionMode.MESSAGE_CONTEXT_MENU: message_context_menu,
        ExecutionMode.USER_CONTEXT_MENU: user_context_menu,
        ExecutionMode.AI: ai,
    }
    return LoadedCommand(
        command=Command(
            id=id or uuid.uuid4().hex,
            name=name,
            category=category,
            aliases=tuple(aliases),
            middlewares=tuple(middlewares),
        ),
        definition=CommandDefinition(name=name, description=description, options=dict(options or {})),
        handlers={mode: fn for mode, fn in handlers.items() if fn is not None},
        metadata=metadata or CommandMetadata(),
        guilds=tuple(guilds),
    )


def define_middleware(
    name: str,
    *,
    before: MiddlewareFunction | None = None,
    after: MiddlewareFunction | None = None,
    id: str | None = None,  # noqa: A002
) -> LoadedMiddleware:
    """Convenience builder for a :class:`LoadedMiddleware`."""
    return LoadedMiddleware(
        middleware=Middleware(id=id or uuid.uuid4().hex, name=name),
        before_execute=before,
        after_execute=after,
    )


__all__ = [
    "Command",
    "CommandDefinition",
    "CommandMetadata",
    "ExecutionMode",
    "Handler",
    "INTERACTION_MODES",
    "LoadedCommand",
    "LoadedMiddleware",
    "Middleware",
    "MiddlewareFunction",
    "OptionType",
    "ResolvedCommand",
    "define_command",
    "define_middleware",
]
