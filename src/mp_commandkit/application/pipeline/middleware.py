"""Application pipeline – CommandMiddleware base."""
from __future__ import annotations

import abc
from typing import Any

from mp_commandkit.application.commands import MiddlewareContext


class CommandMiddleware(abc.ABC):  # noqa: B024
    """Class-based middleware with optional before- and after-phase hooks.

    Either hook may raise a signal or return
    :attr:`~mp_commandkit.kernel.signals.PipelineDecision.STOP`.
    Wrap an instance with :meth:`LoadedMiddleware.from_object` to register it.
    """

    async def before_execute(self, ctx: MiddlewareContext) -> Any:  # noqa: B027
        return None

    async def after_execute(self, ctx: MiddlewareContext) -> Any:  # noqa: B027
        return None


__all__ = ["CommandMiddleware"]
