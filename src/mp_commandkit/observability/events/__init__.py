"""Observability – diagnostic events."""
from mp_commandkit.observability.events.emitter import (
    DiagnosticEvents,
    EventEmitter,
    Listener,
    StructuredEvent,
)

__all__ = ["DiagnosticEvents", "EventEmitter", "Listener", "StructuredEvent"]
