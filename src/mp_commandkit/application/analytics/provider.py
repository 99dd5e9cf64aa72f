"""Application analytics – AnalyticsEvent and the AnalyticsProvider port."""
from __future__ import annotations

import abc
import dataclasses
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mp_commandkit.application.analytics.engine import AnalyticsEngine

IdentifyEvent = dict[str, Any]


@dataclasses.dataclass(frozen=True)
class AnalyticsEvent:
    name: str
    data: dict[str, Any] = dataclasses.field(default_factory=dict)
    id: str | None = None


class AnalyticsProvider(abc.ABC):
    """Sink receiving the events tracked by an :class:`AnalyticsEngine`."""

    name: str = "provider"

    @abc.abstractmethod
    async def track(self, engine: "AnalyticsEngine", event: AnalyticsEvent) -> None: ...

    async def identify(self, engine: "AnalyticsEngine", event: IdentifyEvent) -> None:  # noqa: B027
        return None


__all__ = ["AnalyticsEvent", "AnalyticsProvider", "IdentifyEvent"]
