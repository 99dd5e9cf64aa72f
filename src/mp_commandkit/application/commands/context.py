"""Application commands – Context and MiddlewareContext.

A context is a uniform façade over exactly one inbound request; handlers and
middlewares read options, identity and scope through it regardless of the
request's shape.
"""
from __future__ import annotations

import dataclasses
import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, NoReturn

from mp_commandkit.application.commands.models import (
    INTERACTION_MODES,
    ExecutionMode,
    LoadedCommand,
)
from mp_commandkit.application.commands.parser import (
    CommandOptions,
    InteractionOptions,
    MessageCommandParser,
)
from mp_commandkit.application.commands.requests import Interaction, Message, Request
from mp_commandkit.context import ExecutionEnvironment, get_environment
from mp_commandkit.kernel.errors import (
    CommandNotFoundError,
    DispatchError,
    MissingHandlerError,
    NoEnvironmentError,
)
from mp_commandkit.kernel.signals import InvalidPrefix, dm_only, guild_only, redirect

if TYPE_CHECKING:
    from mp_commandkit.application.resolver import CommandResolver

Execute = Callable[[], Awaitable[Any]]
RunCommand = Callable[[Execute], Execute]


@dataclasses.dataclass(frozen=True)
class ContextParameters:
    command: LoadedCommand
    execution_mode: ExecutionMode
    interaction: Interaction | None = None
    message: Message | None = None
    environment: ExecutionEnvironment | None = None
    forwarded: bool = False
    parser: MessageCommandParser | None = None
    store: dict[Any, Any] | None = None
    set_command_runner: Callable[[RunCommand], None] | None = None


class Context:
    """Read surface shared by command handlers and middlewares."""

    def __init__(self, resolver: "CommandResolver", params: ContextParameters) -> None:
        if (params.interaction is None) == (params.message is None):
            raise DispatchError("A context wraps exactly one interaction or one message")
        self._resolver = resolver
        self._params = params
        self._store: dict[Any, Any] = params.store if params.store is not None else {}

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def interaction(self) -> Interaction | None:
        return self._params.interaction

    @property
    def message(self) -> Message | None:
        return self._params.message

    @property
    def source(self) -> Request:
        return self._params.interaction or self._params.message  # type: ignore[return-value]

    @property
    def command(self) -> LoadedCommand:
        return self._params.command

    @property
    def environment(self) -> ExecutionEnvironment | None:
        return self._params.environment

    @property
    def execution_mode(self) -> ExecutionMode:
        return self._params.execution_mode

    @property
    def forwarded(self) -> bool:
        return self._params.forwarded

    @property
    def guild_id(self) -> str | None:
        return self.source.guild_id

    @property
    def channel_id(self) -> str | None:
        return self.source.channel_id

    @property
    def store(self) -> dict[Any, Any]:
        env = self._params.environment
        return env.store if env is not None else self._store

    @property
    def command_name(self) -> str:
        """Canonical name of the command (aliases resolved)."""
        if self._params.interaction is not None:
            return self._params.interaction.command_name or self.command.name
        invoked = self._invoked_message_command()
        if not invoked:
            return self.command.name
        return self._resolver.resolve_message_command_name(invoked)

    @property
    def invoked_command_name(self) -> str:
        """Name exactly as the user typed it (may be an alias)."""
        if self._params.interaction is not None:
            return self._params.interaction.command_name or self.command.name
        return self._invoked_message_command() or self.command.name

    def _invoked_message_command(self) -> str | None:
        parser = self._params.parser
        if parser is None:
            return None
        try:
            return parser.get_command()
        except InvalidPrefix:
            return None

    def get_command_identifier(self) -> str:
        return self.invoked_command_name

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    @property
    def options(self) -> CommandOptions:
        if self.is_message():
            parser = self._params.parser
            if parser is None:
                raise DispatchError("Message context has no command parser")
            return parser.options
        return InteractionOptions(self._params.interaction)  # type: ignore[arg-type]

    def args(self) -> list[str]:
        if self.is_message() and self._params.parser is not None:
            try:
                return self._params.parser.get_args()
            except InvalidPrefix:
                return []
        return []

    # ------------------------------------------------------------------
    # Mode queries
    # ------------------------------------------------------------------

    def is_interaction(self) -> bool:
        return self.execution_mode in INTERACTION_MODES

    def is_chat_input_command(self) -> bool:
        return self.execution_mode is ExecutionMode.CHAT_INPUT

    def is_autocomplete(self) -> bool:
        return self.execution_mode is ExecutionMode.AUTOCOMPLETE

    def is_message_context_menu(self) -> bool:
        return self.execution_mode is ExecutionMode.MESSAGE_CONTEXT_MENU

    def is_user_context_menu(self) -> bool:
        return self.execution_mode is ExecutionMode.USER_CONTEXT_MENU

    def is_message(self) -> bool:
        return self.execution_mode is ExecutionMode.MESSAGE

    def is_middleware(self) -> bool:
        return isinstance(self, MiddlewareContext)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def reply(self, content: str, *, ephemeral: bool = False) -> Any:
        return await self.source.reply(content, ephemeral=ephemeral)

    def ensure_guild(self) -> None:
        """Raise :class:`~mp_commandkit.kernel.signals.GuildOnly` outside a guild."""
        if self.guild_id is None:
            guild_only()

    def ensure_dm(self) -> None:
        """Raise :class:`~mp_commandkit.kernel.signals.DMOnly` inside a guild."""
        if self.guild_id is not None:
            dm_only()

    async def forward_command(self, name: str) -> NoReturn:
        """Run *name*'s handler for the current mode, then stop this command.

        The target is resolved against the same request, bypassing the outer
        middleware chain. This never returns: it always finishes by raising
        :class:`~mp_commandkit.kernel.signals.ForwardedCommand`.
        """
        target = await self._resolver.prepare_command_run(self.source, name)
        if target is None:
            raise CommandNotFoundError(name)

        env = self._params.environment or get_environment()
        if env is None:
            raise NoEnvironmentError()

        kind = env.variables.get("exec_handler_kind")
        if kind is None:
            raise DispatchError("No execution handler kind found")
        mode = ExecutionMode.parse(kind)
        handler = target.command.handler_for(mode)
        if handler is None:
            raise MissingHandlerError(target.command.name, mode.value)

        env.variables["forwarded_by"] = self.command_name
        env.variables["forwarded_to"] = name
        result = handler(
            self.clone(
                command=target.command,
                forwarded=True,
                parser=target.parser or self._params.parser,
            )
        )
        if inspect.isawaitable(result):
            await result
        redirect()

    def clone(self, **overrides: Any) -> "Context":
        """Return a plain :class:`Context` sharing this context's store."""
        values: dict[str, Any] = {"set_command_runner": None, "store": self.store, **overrides}
        return Context(self._resolver, dataclasses.replace(self._params, **values))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(command={self.command.name!r}, "
            f"mode={self.execution_mode.value!r}, forwarded={self.forwarded})"
        )


class MiddlewareContext(Context):
    """Context handed to middlewares; adds cancellation and runner wrapping."""

    def __init__(self, resolver: "CommandResolver", params: ContextParameters) -> None:
        super().__init__(resolver, params)
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Mark the dispatch as cancelled.

        This only sets a flag; raise
        :class:`~mp_commandkit.kernel.signals.StopMiddlewares` (or return
        ``PipelineDecision.STOP``) to actually halt execution.
        """
        self._cancelled = True

    def set_command_runner(self, fn: RunCommand) -> None:
        """Wrap the command invocation with *fn* (e.g. for timing or locking)."""
        setter = self._params.set_command_runner
        if setter is not None:
            setter(fn)


__all__ = [
    "Context",
    "ContextParameters",
    "Execute",
    "MiddlewareContext",
    "RunCommand",
]
