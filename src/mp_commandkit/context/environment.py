"""Context – ExecutionEnvironment, the per-dispatch state container."""
from __future__ import annotations

import inspect
import time
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable

from mp_commandkit.kernel.errors import (
    EnvironmentTypeNotSetError,
    ExecutionErrorAlreadySetError,
)
from mp_commandkit.observability.events import DiagnosticEvents, EventEmitter, StructuredEvent
from mp_commandkit.observability.logging import get_logger

_log = get_logger(__name__)

DeferredFunction = Callable[["ExecutionEnvironment"], Awaitable[Any] | Any]


class EnvironmentType(str, Enum):
    COMMAND_HANDLER = "command_handler"


class ExecutionEnvironment:
    """Mutable state owned by exactly one dispatch.

    Holds a string-keyed variable bag, a store shared by every context clone,
    the deferred-function registry, a start/end timing pair with a free-text
    marker and at most one captured terminal error.

    Parameters
    ----------
    emitter:
        Receives a diagnostic event for every deferred function that fails.
    timer:
        Monotonic clock returning seconds; injectable for deterministic tests.
    """

    def __init__(
        self,
        *,
        emitter: EventEmitter | None = None,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._emitter = emitter
        self._timer = timer
        self._execution_error: BaseException | None = None
        self._type: EnvironmentType | None = None
        self._variables: dict[str, Any] = {}
        self._store: dict[Any, Any] = {}
        self._deferred: dict[str, DeferredFunction] = {}
        self._marker = ""
        self._mark_start: float | None = None
        self._mark_end: float | None = None

    # ------------------------------------------------------------------
    # Captured error
    # ------------------------------------------------------------------

    def get_execution_error(self) -> BaseException | None:
        return self._execution_error

    def set_execution_error(self, error: BaseException) -> None:
        if self._execution_error is not None:
            raise ExecutionErrorAlreadySetError()
        self._execution_error = error

    # ------------------------------------------------------------------
    # Type and variables
    # ------------------------------------------------------------------

    def get_type(self) -> EnvironmentType:
        if self._type is None:
            raise EnvironmentTypeNotSetError()
        return self._type

    def set_type(self, env_type: EnvironmentType) -> None:
        self._type = env_type

    @property
    def variables(self) -> dict[str, Any]:
        return self._variables

    @property
    def store(self) -> dict[Any, Any]:
        return self._store

    # ------------------------------------------------------------------
    # Deferred functions
    # ------------------------------------------------------------------

    def register_deferred_function(self, fn: DeferredFunction) -> str:
        """Register *fn* to run once the dispatch settles; returns its id."""
        fn_id = uuid.uuid4().hex
        self._deferred[fn_id] = fn
        return fn_id

    def clear_deferred_function(self, fn_id: str) -> None:
        self._deferred.pop(fn_id, None)

    def clear_all_deferred_functions(self) -> None:
        self._deferred.clear()

    @property
    def deferred_function_ids(self) -> list[str]:
        return list(self._deferred)

    async def run_deferred_functions(self) -> None:
        """Run every deferred function sequentially, in registration order.

        Each entry is removed right after it ran, whatever the outcome, so a
        function registered while draining runs in the same drain. A failure
        is logged and emitted as a diagnostic event; it never stops the
        remaining functions.
        """
        while self._deferred:
            fn_id, fn = next(iter(self._deferred.items()))
            try:
                result = fn(self)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # noqa: BLE001
                _log.exception("deferred.failed", deferred_id=fn_id)
                if self._emitter is not None:
                    self._emitter.emit(
                        StructuredEvent(
                            name=DiagnosticEvents.UNHANDLED_DEFERRED_FUNCTION_REJECTION,
                            fields={"deferred_id": fn_id, "error": exc},
                        )
                    )
            finally:
                self.clear_deferred_function(fn_id)

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def mark_start(self, marker: str) -> None:
        self._marker = marker
        self._mark_start = self._now_ms()

    def mark_end(self) -> None:
        """Record the end timestamp; later calls are no-ops."""
        if self._mark_end is None:
            self._mark_end = self._now_ms()

    def get_marker(self) -> str:
        return self._marker

    def get_execution_time(self) -> float:
        """Elapsed milliseconds between start and end (or now, if not ended)."""
        if self._mark_start is None:
            return 0.0
        end = self._mark_end if self._mark_end is not None else self._now_ms()
        return abs(end - self._mark_start)

    def _now_ms(self) -> float:
        return self._timer() * 1000.0

    def __repr__(self) -> str:
        return (
            f"ExecutionEnvironment(marker={self._marker!r}, "
            f"deferred={len(self._deferred)}, error={self._execution_error!r})"
        )


__all__ = ["DeferredFunction", "EnvironmentType", "ExecutionEnvironment"]
