"""Application analytics – pluggable sink for dispatch metrics."""
from mp_commandkit.application.analytics.constants import DO_NOT_TRACK_KEY, AnalyticsEvents
from mp_commandkit.application.analytics.engine import (
    AnalyticsEngine,
    FilterFunction,
    get_do_not_track,
    no_analytics,
)
from mp_commandkit.application.analytics.provider import (
    AnalyticsEvent,
    AnalyticsProvider,
    IdentifyEvent,
)

__all__ = [
    "DO_NOT_TRACK_KEY",
    "AnalyticsEngine",
    "AnalyticsEvent",
    "AnalyticsEvents",
    "AnalyticsProvider",
    "FilterFunction",
    "IdentifyEvent",
    "get_do_not_track",
    "no_analytics",
]
