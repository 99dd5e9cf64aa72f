from __future__ import annotations

import json
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from mp_commandkit.observability.logging import get_logger

__all__ = [
    "DiagnosticEvents",
    "EventEmitter",
    "Listener",
    "StructuredEvent",
]

_log = get_logger(__name__)


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, BaseException):
        return repr(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class DiagnosticEvents:
    UNHANDLED_DEFERRED_FUNCTION_REJECTION = "unhandled_deferred_function_rejection"


@dataclass
class StructuredEvent:
    name: str
    service: str = "mp_commandkit"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "service": self.service,
            "timestamp": self.timestamp.isoformat(),
            **self.fields,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=_default_serializer)


Listener = Callable[[StructuredEvent], None]


class EventEmitter:
    """Buffers diagnostic events and fans them out to subscribed listeners.

    Listeners run synchronously in subscription order; a failing listener is
    logged and never affects the emitter or the other listeners.
    """

    def __init__(self, max_buffer: int = 1000) -> None:
        self._buffer: deque[StructuredEvent] = deque(maxlen=max_buffer)
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, name: str, listener: Listener) -> None:
        self._listeners[name].append(listener)

    def off(self, name: str, listener: Listener) -> None:
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: StructuredEvent) -> None:
        self._buffer.append(event)
        for listener in list(self._listeners.get(event.name, ())):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                _log.exception("events.listener_failed", event_name=event.name)

    async def flush(self) -> int:
        count = len(self._buffer)
        self._buffer.clear()
        return count

    @property
    def buffered(self) -> list[StructuredEvent]:
        return list(self._buffer)
