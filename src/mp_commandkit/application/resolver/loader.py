"""Application resolver – loader port."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Awaitable, Protocol

from mp_commandkit.application.commands import LoadedCommand, LoadedMiddleware


@dataclasses.dataclass(frozen=True)
class LoaderData:
    """Snapshot of loaded commands and middlewares, keyed by stable id."""

    commands: Mapping[str, LoadedCommand] = dataclasses.field(default_factory=dict)
    middlewares: Mapping[str, LoadedMiddleware] = dataclasses.field(default_factory=dict)


class CommandLoader(Protocol):
    """Port: supplies the current command and middleware tables."""

    def get_data(self) -> LoaderData | Awaitable[LoaderData]: ...


__all__ = ["CommandLoader", "LoaderData"]
