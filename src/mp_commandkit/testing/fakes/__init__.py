"""Testing fakes – in-memory doubles for the dispatcher's collaborators."""
from mp_commandkit.testing.fakes.analytics import InMemoryAnalyticsProvider
from mp_commandkit.testing.fakes.loader import StaticCommandLoader
from mp_commandkit.testing.fakes.plugin import RecordingPlugin
from mp_commandkit.testing.fakes.requests import make_interaction, make_message
from mp_commandkit.testing.fakes.responder import RecordingResponder, Reply

__all__ = [
    "InMemoryAnalyticsProvider",
    "RecordingPlugin",
    "RecordingResponder",
    "Reply",
    "StaticCommandLoader",
    "make_interaction",
    "make_message",
]
