"""Application pipeline – CommandRunner, the middleware state machine.

One call to :meth:`CommandRunner.run_command` is one dispatch::

    before-middlewares ──► command body ──► after-middlewares
            │ Stop               │ Stop / scope violation
            ▼                    ▼
      cancellation result     (after phase skipped)

Whatever happens, the dispatch ends by draining the environment's deferred
functions inside the ambient scope and calling every plugin's
``on_after_command`` hook.
"""
from __future__ import annotations

import dataclasses
import inspect
from typing import TYPE_CHECKING, Any, Callable

from mp_commandkit.application.analytics import AnalyticsEngine, AnalyticsEvent, AnalyticsEvents
from mp_commandkit.application.commands import (
    ContextParameters,
    Execute,
    ExecutionMode,
    Interaction,
    LoadedMiddleware,
    Message,
    MiddlewareContext,
    Request,
    ResolvedCommand,
    RunCommand,
    get_execution_mode,
)
from mp_commandkit.application.plugins import PluginRuntime, RuntimePlugin
from mp_commandkit.context import (
    DeferredFunction,
    EnvironmentType,
    ExecutionEnvironment,
    make_context_aware_function,
    provide_context,
)
from mp_commandkit.kernel.errors import DispatchError, error_fields
from mp_commandkit.kernel.signals import (
    Continue,
    Fail,
    Forward,
    PhaseOutcome,
    SignalKind,
    Skip,
    Stop,
    classify,
    from_decision,
)
from mp_commandkit.observability.events import EventEmitter
from mp_commandkit.observability.logging import get_logger

if TYPE_CHECKING:
    from mp_commandkit.application.resolver import CommandResolver

_log = get_logger(__name__)

CANCELLED_MESSAGE = "Command execution was cancelled by a middleware."

_SCOPE_REJECTIONS = {
    SignalKind.GUILD_ONLY: "This command can only be used in a server.",
    SignalKind.DM_ONLY: "This command can only be used in direct messages.",
}


def cancelled_result() -> dict[str, Any]:
    return {"error": True, "message": CANCELLED_MESSAGE}


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _run_phase(fn: Callable[..., Any], ctx: MiddlewareContext) -> PhaseOutcome:
    try:
        value = await _resolve(fn(ctx))
    except Exception as exc:  # noqa: BLE001
        return classify(exc)
    return from_decision(value)


@dataclasses.dataclass(frozen=True)
class RunCommandOptions:
    """Per-call options of :meth:`CommandRunner.run_command`.

    ``handler`` runs another handler kind of the command (e.g. ``"ai"``)
    instead of the one matching the request; ``throw_on_error`` re-raises
    errors of the command body instead of only logging them.
    """

    handler: ExecutionMode | str | None = None
    throw_on_error: bool = False


@dataclasses.dataclass
class _DispatchState:
    before_middlewares_stopped: bool = False
    stop_middlewares_called_in_cmd: bool = False
    command_runner: RunCommand | None = None


class CommandRunner:
    """Runs a resolved command through its middleware chain.

    Parameters
    ----------
    resolver:
        Used by contexts to resolve forwarding targets and aliases.
    plugins:
        Receives ``execute_command`` and ``on_after_command`` hook calls.
    analytics:
        Receives one ``command_execution`` event per command body.
    emitter:
        Diagnostic events of failing deferred functions.
    """

    def __init__(
        self,
        resolver: "CommandResolver",
        *,
        plugins: PluginRuntime | None = None,
        analytics: AnalyticsEngine | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self._resolver = resolver
        self._plugins = plugins if plugins is not None else PluginRuntime()
        self._analytics = analytics if analytics is not None else AnalyticsEngine()
        self._emitter = emitter

    @staticmethod
    def get_execution_mode(source: Request) -> ExecutionMode | None:
        return get_execution_mode(source)

    async def run_command(
        self,
        resolved: ResolvedCommand,
        source: Request,
        options: RunCommandOptions | None = None,
    ) -> Any:
        """Dispatch *source* to *resolved* and return the handler's result.

        Returns :func:`cancelled_result` when a before-middleware stopped the
        pipeline and ``None`` when the command body failed. A before- or
        after-middleware error propagates; a command body error propagates
        only with ``throw_on_error``.
        """
        if isinstance(source, Message) and source.partial:
            return None

        options = options or RunCommandOptions()
        override = ExecutionMode.parse(options.handler) if options.handler is not None else None
        mode = get_execution_mode(source)
        if mode is None:
            raise DispatchError("Request is not a command invocation")
        handler_kind = override or mode

        env = ExecutionEnvironment(emitter=self._emitter)
        env.set_type(EnvironmentType.COMMAND_HANDLER)
        env.variables["command_handler_type"] = mode.value
        env.variables["current_command_name"] = resolved.command.name
        env.variables["custom_handler"] = override.value if override is not None else None
        env.variables["exec_handler_kind"] = handler_kind.value

        state = _DispatchState()

        def set_command_runner(fn: RunCommand) -> None:
            state.command_runner = fn

        ctx = MiddlewareContext(
            self._resolver,
            ContextParameters(
                command=resolved.command,
                execution_mode=mode,
                interaction=source if isinstance(source, Interaction) else None,
                message=source if isinstance(source, Message) else None,
                environment=env,
                parser=resolved.parser,
                set_command_runner=set_command_runner,
            ),
        )

        try:
            return await provide_context(
                env, self._run_pipeline, ctx, env, resolved, handler_kind, options, state
            )
        finally:
            await provide_context(env, self._finalize, env)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _run_pipeline(
        self,
        ctx: MiddlewareContext,
        env: ExecutionEnvironment,
        resolved: ResolvedCommand,
        handler_kind: ExecutionMode,
        options: RunCommandOptions,
        state: _DispatchState,
    ) -> Any:
        match await self._run_before(ctx, resolved.middlewares):
            case Stop() as stop:
                state.before_middlewares_stopped = True
                if stop.scope_violation:
                    await self._reject(ctx, stop.kind)
                _log.debug("pipeline.cancelled", command=resolved.command.name)
                return cancelled_result()
            case Fail(error=error):
                if env.get_execution_error() is None:
                    env.set_execution_error(error)
                raise error

        result = await self._run_command(ctx, env, resolved, handler_kind, options, state)

        if not (state.before_middlewares_stopped or state.stop_middlewares_called_in_cmd):
            await self._run_after(ctx, resolved.middlewares)

        return result

    async def _run_before(
        self, ctx: MiddlewareContext, middlewares: tuple[LoadedMiddleware, ...]
    ) -> PhaseOutcome:
        for middleware in middlewares:
            if middleware.before_execute is None:
                continue
            outcome = await _run_phase(middleware.before_execute, ctx)
            match outcome:
                case Stop():
                    return outcome
                case Fail(error=error):
                    _log.error("middleware.failed", middleware=middleware.id, phase="before", **error_fields(error))
                    return outcome
                case Continue() | Forward() | Skip():
                    continue
        return Continue()

    async def _run_command(
        self,
        ctx: MiddlewareContext,
        env: ExecutionEnvironment,
        resolved: ResolvedCommand,
        handler_kind: ExecutionMode,
        options: RunCommandOptions,
        state: _DispatchState,
    ) -> Any:
        loaded = resolved.command
        handler = loaded.handler_for(handler_kind)
        if handler is None:
            _log.warning("command.handler_missing", command=loaded.name, mode=handler_kind.value)
            return None

        async def execute_handler() -> Any:
            if loaded.metadata.guild_only:
                ctx.ensure_guild()
            if loaded.metadata.dm_only:
                ctx.ensure_dm()
            return await _resolve(handler(ctx.clone()))

        execute: Execute = execute_handler
        if state.command_runner is not None:
            execute = state.command_runner(execute_handler)

        async def invoke() -> Any:
            env.register_deferred_function(self._track_execution(loaded.name, handler_kind))
            env.mark_start(loaded.name)

            # the body runs at most once; later run() calls replay its outcome
            invocation: dict[str, Any] = {}

            async def run() -> Any:
                if "called" not in invocation:
                    invocation["called"] = True
                    try:
                        invocation["value"] = await execute()
                    except Exception as exc:
                        invocation["error"] = exc
                if "error" in invocation:
                    raise invocation["error"]
                return invocation.get("value")

            async def intercept(runtime: PluginRuntime, plugin: RuntimePlugin) -> Any:
                try:
                    return await plugin.execute_command(runtime, env, ctx.source, resolved, run)
                except Exception as exc:
                    if exc is invocation.get("error"):
                        return True
                    raise

            handled = await self._plugins.execute(intercept)
            if "called" in invocation or not handled:
                return await run()
            return None

        wrapped = make_context_aware_function(env, invoke, finalizer=env.run_deferred_functions)

        try:
            return await wrapped()
        except Exception as exc:
            match classify(exc, target=env.variables.get("forwarded_to")):
                case Stop() as stop:
                    state.stop_middlewares_called_in_cmd = True
                    if stop.scope_violation:
                        await self._reject(ctx, stop.kind)
                case Forward(target=target):
                    _log.debug("command.forwarded", command=loaded.name, target=target)
                case Skip():
                    pass
                case Fail():
                    if options.throw_on_error:
                        raise
                    _log.exception("command.failed", command=loaded.name, **error_fields(exc))
            return None

    async def _run_after(
        self, ctx: MiddlewareContext, middlewares: tuple[LoadedMiddleware, ...]
    ) -> None:
        for middleware in middlewares:
            if middleware.after_execute is None:
                continue
            match await _run_phase(middleware.after_execute, ctx):
                case Stop():
                    return
                case Fail(error=error):
                    _log.error("middleware.failed", middleware=middleware.id, phase="after", **error_fields(error))
                    raise error

    async def _finalize(self, env: ExecutionEnvironment) -> None:
        try:
            await env.run_deferred_functions()
        finally:
            env.clear_all_deferred_functions()
            await self._plugins.execute(
                lambda runtime, plugin: plugin.on_after_command(runtime, env)
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _track_execution(self, command_name: str, handler_kind: ExecutionMode) -> DeferredFunction:
        async def track(env: ExecutionEnvironment) -> None:
            env.mark_end()
            error = env.get_execution_error()
            execution_time = env.get_execution_time()
            _log.info(
                "command.executed",
                command=command_name,
                execution_mode=handler_kind.value,
                execution_time=execution_time,
                error=error is not None,
            )
            await self._analytics.track(
                AnalyticsEvent(
                    name=AnalyticsEvents.COMMAND_EXECUTION,
                    id=command_name,
                    data={
                        "error": error is not None,
                        "execution_time": execution_time,
                        "type": handler_kind.value,
                        "command": command_name,
                    },
                )
            )

        return track

    @staticmethod
    async def _reject(ctx: MiddlewareContext, kind: SignalKind) -> None:
        try:
            await ctx.reply(_SCOPE_REJECTIONS[kind], ephemeral=True)
        except Exception:  # noqa: BLE001
            _log.exception("command.rejection_failed", reason=kind.value)


__all__ = [
    "CANCELLED_MESSAGE",
    "CommandRunner",
    "RunCommandOptions",
    "cancelled_result",
]
