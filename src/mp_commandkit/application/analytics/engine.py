"""Application analytics – AnalyticsEngine and the do-not-track switch."""
from __future__ import annotations

from typing import Callable

from mp_commandkit.application.analytics.constants import DO_NOT_TRACK_KEY
from mp_commandkit.application.analytics.provider import (
    AnalyticsEvent,
    AnalyticsProvider,
    IdentifyEvent,
)
from mp_commandkit.context import get_environment
from mp_commandkit.kernel.errors import NoEnvironmentError
from mp_commandkit.observability.logging import get_logger

_log = get_logger(__name__)

FilterFunction = Callable[["AnalyticsEngine", AnalyticsEvent], bool]


def no_analytics() -> None:
    """Drop every event tracked for the current dispatch."""
    env = get_environment()
    if env is None:
        raise NoEnvironmentError("no_analytics() must be called inside a command handler")
    env.variables[DO_NOT_TRACK_KEY] = True


def get_do_not_track() -> bool:
    env = get_environment()
    return env is not None and env.variables.get(DO_NOT_TRACK_KEY) is True


class AnalyticsEngine:
    """Forwards events to a single registered provider.

    Without a provider every call is a no-op. Provider failures are logged
    and never reach the caller.
    """

    def __init__(self) -> None:
        self._provider: AnalyticsProvider | None = None
        self._filter: FilterFunction | None = None

    def set_filter(self, fn: FilterFunction | None) -> None:
        """Install *fn*; an event is dropped when it returns ``False``."""
        self._filter = fn

    def register_provider(self, provider: AnalyticsProvider) -> None:
        self._provider = provider

    def remove_provider(self, provider: AnalyticsProvider) -> None:
        if self._provider is provider:
            self._provider = None

    def get_provider(self) -> AnalyticsProvider | None:
        return self._provider

    async def identify(self, event: IdentifyEvent) -> None:
        provider = self._provider
        if provider is None:
            return
        try:
            await provider.identify(self, event)
        except Exception:  # noqa: BLE001
            _log.exception("analytics.identify_failed", provider=provider.name)

    async def track(self, event: AnalyticsEvent) -> None:
        provider = self._provider
        if provider is None:
            return
        try:
            if self._do_not_track(event):
                return
            await provider.track(self, event)
        except Exception:  # noqa: BLE001
            _log.exception("analytics.track_failed", provider=provider.name, event_name=event.name)

    def _do_not_track(self, event: AnalyticsEvent) -> bool:
        if get_do_not_track():
            return True
        if self._filter is not None:
            return not self._filter(self, event)
        return False


__all__ = ["AnalyticsEngine", "FilterFunction", "get_do_not_track", "no_analytics"]
