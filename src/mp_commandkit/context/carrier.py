"""Context – ambient ExecutionEnvironment carried in a ``ContextVar``.

Each asyncio task copies the current context when it is created, so every
dispatch (one task per inbound request) resolves its own environment across
``await`` points without threading it through function signatures.
"""
from __future__ import annotations

import contextvars
import functools
import inspect
from typing import Any, Awaitable, Callable, TypeVar

from mp_commandkit.context.environment import DeferredFunction, ExecutionEnvironment
from mp_commandkit.kernel.errors import NoEnvironmentError
from mp_commandkit.kernel.signals import ControlSignal
from mp_commandkit.observability.logging import get_logger

T = TypeVar("T")

_log = get_logger(__name__)

_ENV_VAR: contextvars.ContextVar[ExecutionEnvironment | None] = contextvars.ContextVar(
    "_mp_execution_environment", default=None
)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def provide_context(
    env: ExecutionEnvironment,
    receiver: Callable[..., Awaitable[T] | T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run *receiver* with *env* as the ambient environment.

    The previous environment (if any) is restored when *receiver* returns or
    raises.
    """
    token = _ENV_VAR.set(env)
    try:
        return await _resolve(receiver(*args, **kwargs))
    finally:
        _ENV_VAR.reset(token)


def exit_context(fn: Callable[[], T]) -> T:
    """Run the synchronous *fn* with no ambient environment."""
    token = _ENV_VAR.set(None)
    try:
        return fn()
    finally:
        _ENV_VAR.reset(token)


def get_environment() -> ExecutionEnvironment | None:
    """Return the ambient environment, or ``None`` outside a dispatch."""
    return _ENV_VAR.get()


def use_environment() -> ExecutionEnvironment:
    """Return the ambient environment or raise :class:`NoEnvironmentError`."""
    env = _ENV_VAR.get()
    if env is None:
        raise NoEnvironmentError()
    return env


def make_context_aware_function(
    env: ExecutionEnvironment,
    fn: Callable[..., Any],
    finalizer: Callable[..., Any] | None = None,
) -> Callable[..., Awaitable[Any]]:
    """Return an async wrapper running *fn* inside *env*.

    Ordinary exceptions are recorded as the environment's execution error
    (first one wins) and re-raised; signals pass through untouched. The
    optional *finalizer* always runs afterwards, inside the same scope, and
    its own failure is only logged.
    """

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        async def _run() -> Any:
            try:
                return await _resolve(fn(*args, **kwargs))
            except Exception as exc:
                if not isinstance(exc, ControlSignal) and env.get_execution_error() is None:
                    env.set_execution_error(exc)
                raise
            finally:
                if finalizer is not None:
                    try:
                        await _resolve(finalizer(*args, **kwargs))
                    except Exception:  # noqa: BLE001
                        _log.exception("context.finalizer_failed")

        return await provide_context(env, _run)

    return wrapper


def after(fn: DeferredFunction) -> str:
    """Run *fn* after the current command finished; returns the deferred id."""
    env = get_environment()
    if env is None:
        raise NoEnvironmentError("after() must be called inside a command handler")
    return env.register_deferred_function(fn)


def cancel_after(fn_id: str) -> None:
    """Cancel a deferred function registered with :func:`after`."""
    env = get_environment()
    if env is None:
        raise NoEnvironmentError("cancel_after() must be called inside a command handler")
    env.clear_deferred_function(fn_id)


__all__ = [
    "after",
    "cancel_after",
    "exit_context",
    "get_environment",
    "make_context_aware_function",
    "provide_context",
    "use_environment",
]
