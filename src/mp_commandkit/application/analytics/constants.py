"""Application analytics – event names and environment keys."""
from __future__ import annotations

import uuid

DO_NOT_TRACK_KEY = f"mp_commandkit:analytics:do_not_track:{uuid.uuid4().hex}"


class AnalyticsEvents:
    COMMAND_EXECUTION = "command_execution"


__all__ = ["DO_NOT_TRACK_KEY", "AnalyticsEvents"]
