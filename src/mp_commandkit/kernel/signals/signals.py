"""Control-flow signals.

Signals are raised to short-circuit a dispatch and are recognised by their
``kind`` only; they carry no message and never inherit from
:class:`~mp_commandkit.kernel.errors.BaseError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import NoReturn


class SignalKind(str, Enum):
    STOP_MIDDLEWARES = "stop_middlewares"
    FORWARDED_COMMAND = "forwarded_command"
    INVALID_PREFIX = "invalid_prefix"
    GUILD_ONLY = "guild_only"
    DM_ONLY = "dm_only"
    PLUGIN_CAPTURE_HANDLE = "plugin_capture_handle"


class ControlSignal(Exception):
    """Base class of every control-flow signal."""

    kind: SignalKind

    def __init__(self) -> None:
        super().__init__()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r})"


class StopMiddlewares(ControlSignal):
    """Stop the remaining middlewares of the current phase.

    Raised in a before-middleware, the command body is skipped as well; raised
    in the command body, every after-middleware is skipped; raised in an
    after-middleware, the remaining after-middlewares are skipped.
    """

    kind = SignalKind.STOP_MIDDLEWARES


ExitMiddleware = StopMiddlewares


class ForwardedCommand(ControlSignal):
    """The current command handed the request over to another command."""

    kind = SignalKind.FORWARDED_COMMAND


class InvalidPrefix(ControlSignal):
    """A message did not start with any accepted command prefix."""

    kind = SignalKind.INVALID_PREFIX


class GuildOnly(ControlSignal):
    """The command may only run inside a guild."""

    kind = SignalKind.GUILD_ONLY


class DMOnly(ControlSignal):
    """The command may only run in direct messages."""

    kind = SignalKind.DM_ONLY


class PluginCaptureHandle(ControlSignal):
    """A plugin claimed the current hook; remaining plugins are skipped."""

    kind = SignalKind.PLUGIN_CAPTURE_HANDLE


_SIGNALS: dict[SignalKind, type[ControlSignal]] = {
    SignalKind.STOP_MIDDLEWARES: StopMiddlewares,
    SignalKind.FORWARDED_COMMAND: ForwardedCommand,
    SignalKind.INVALID_PREFIX: InvalidPrefix,
    SignalKind.GUILD_ONLY: GuildOnly,
    SignalKind.DM_ONLY: DMOnly,
    SignalKind.PLUGIN_CAPTURE_HANDLE: PluginCaptureHandle,
}


def create_signal(kind: SignalKind) -> ControlSignal:
    """Build the signal instance for *kind*."""
    return _SIGNALS[kind]()


def is_signal(
    error: BaseException | None,
    kinds: SignalKind | Iterable[SignalKind] | None = None,
) -> bool:
    """Return ``True`` if *error* is a signal (optionally of one of *kinds*)."""
    if not isinstance(error, ControlSignal):
        return False
    if kinds is None:
        return True
    if isinstance(kinds, SignalKind):
        return error.kind is kinds
    return error.kind in frozenset(kinds)


def stop_middlewares() -> NoReturn:
    """Cancel the upcoming middlewares (see :class:`StopMiddlewares`)."""
    raise StopMiddlewares()


def exit_middleware() -> NoReturn:
    """Alias of :func:`stop_middlewares`."""
    raise ExitMiddleware()


def redirect() -> NoReturn:
    """Stop the current command assuming it was forwarded to another one."""
    raise ForwardedCommand()


def guild_only() -> NoReturn:
    raise GuildOnly()


def dm_only() -> NoReturn:
    raise DMOnly()


def rethrow(error: BaseException) -> None:
    """Re-raise *error* if it is a control signal, otherwise do nothing.

    Useful inside broad ``except`` blocks in user handlers::

        try:
            await ctx.forward_command("other")
        except Exception as exc:
            rethrow(exc)
            ...
    """
    if isinstance(error, ControlSignal):
        raise error


__all__ = [
    "ControlSignal",
    "DMOnly",
    "ExitMiddleware",
    "ForwardedCommand",
    "GuildOnly",
    "InvalidPrefix",
    "PluginCaptureHandle",
    "SignalKind",
    "StopMiddlewares",
    "create_signal",
    "dm_only",
    "exit_middleware",
    "guild_only",
    "is_signal",
    "redirect",
    "rethrow",
    "stop_middlewares",
]
