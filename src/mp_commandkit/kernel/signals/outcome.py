"""Phase outcomes – the closed set of transitions a pipeline phase can take."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from mp_commandkit.kernel.signals.signals import ControlSignal, SignalKind


class PipelineDecision(str, Enum):
    """Value a middleware may *return* instead of raising a signal."""

    CONTINUE = "continue"
    STOP = "stop"


@dataclasses.dataclass(frozen=True)
class Continue:
    """The stage finished normally."""

    value: Any = None


@dataclasses.dataclass(frozen=True)
class Stop:
    """The stage asked the pipeline to halt.

    ``kind`` is ``STOP_MIDDLEWARES`` for an ordinary stop and ``GUILD_ONLY`` /
    ``DM_ONLY`` for a scope violation.
    """

    kind: SignalKind = SignalKind.STOP_MIDDLEWARES

    @property
    def scope_violation(self) -> bool:
        return self.kind in (SignalKind.GUILD_ONLY, SignalKind.DM_ONLY)


@dataclasses.dataclass(frozen=True)
class Forward:
    """The stage handed the request over to another command."""

    target: str | None = None


@dataclasses.dataclass(frozen=True)
class Skip:
    """The stage opted out (invalid prefix, plugin capture)."""

    kind: SignalKind


@dataclasses.dataclass(frozen=True)
class Fail:
    """The stage raised an ordinary (non-signal) error."""

    error: BaseException


type PhaseOutcome = Continue | Stop | Forward | Skip | Fail


def classify(error: BaseException, *, target: str | None = None) -> PhaseOutcome:
    """Map a raised exception onto a :data:`PhaseOutcome`."""
    if not isinstance(error, ControlSignal):
        return Fail(error)
    match error.kind:
        case SignalKind.STOP_MIDDLEWARES | SignalKind.GUILD_ONLY | SignalKind.DM_ONLY:
            return Stop(error.kind)
        case SignalKind.FORWARDED_COMMAND:
            return Forward(target)
        case SignalKind.INVALID_PREFIX | SignalKind.PLUGIN_CAPTURE_HANDLE:
            return Skip(error.kind)
    return Fail(error)


def from_decision(value: Any) -> PhaseOutcome:
    """Map a middleware's return value onto a :data:`PhaseOutcome`."""
    if value is PipelineDecision.STOP:
        return Stop()
    return Continue(value)


__all__ = [
    "Continue",
    "Fail",
    "Forward",
    "PhaseOutcome",
    "PipelineDecision",
    "Skip",
    "Stop",
    "classify",
    "from_decision",
]
