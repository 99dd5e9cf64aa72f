"""Testing support – fakes and generators for dispatcher tests.

Usage::

    from mp_commandkit.testing import RecordingResponder, make_interaction
"""

from mp_commandkit.testing.fakes import (
    InMemoryAnalyticsProvider,
    RecordingPlugin,
    RecordingResponder,
    Reply,
    StaticCommandLoader,
    make_interaction,
    make_message,
)
from mp_commandkit.testing.generators import (
    StepTimer,
    command_name_strategy,
    sentinel_batch_strategy,
)

__all__ = [
    "InMemoryAnalyticsProvider",
    "RecordingPlugin",
    "RecordingResponder",
    "Reply",
    "StaticCommandLoader",
    "StepTimer",
    "command_name_strategy",
    "make_interaction",
    "make_message",
    "sentinel_batch_strategy",
]
