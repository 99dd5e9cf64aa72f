"""Kernel – control-flow signals and phase outcomes."""
from mp_commandkit.kernel.signals.outcome import (
    Continue,
    Fail,
    Forward,
    PhaseOutcome,
    PipelineDecision,
    Skip,
    Stop,
    classify,
    from_decision,
)
from mp_commandkit.kernel.signals.signals import (
    ControlSignal,
    DMOnly,
    ExitMiddleware,
    ForwardedCommand,
    GuildOnly,
    InvalidPrefix,
    PluginCaptureHandle,
    SignalKind,
    StopMiddlewares,
    create_signal,
    dm_only,
    exit_middleware,
    guild_only,
    is_signal,
    redirect,
    rethrow,
    stop_middlewares,
)

__all__ = [
    "Continue",
    "ControlSignal",
    "DMOnly",
    "ExitMiddleware",
    "Fail",
    "Forward",
    "ForwardedCommand",
    "GuildOnly",
    "InvalidPrefix",
    "PhaseOutcome",
    "PipelineDecision",
    "PluginCaptureHandle",
    "SignalKind",
    "Skip",
    "Stop",
    "StopMiddlewares",
    "classify",
    "create_signal",
    "dm_only",
    "exit_middleware",
    "from_decision",
    "guild_only",
    "is_signal",
    "redirect",
    "rethrow",
    "stop_middlewares",
]
