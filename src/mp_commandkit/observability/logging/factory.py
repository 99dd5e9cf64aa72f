"""Observability – LoggerFactory."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from mp_commandkit.observability.logging.processors import EnvironmentProcessor


class JsonLoggerFactory:
    """Configure structlog on top of the stdlib ``logging`` root handler.

    Production renders one JSON object per line; *development* switches to
    structlog's coloured console renderer.
    """

    @staticmethod
    def configure(level: int | str = logging.INFO, *, development: bool = False) -> None:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())

        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            EnvironmentProcessor(),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]
        renderer: Any = (
            structlog.dev.ConsoleRenderer()
            if development
            else structlog.processors.JSONRenderer()
        )
        if not development:
            shared_processors.append(structlog.processors.format_exc_info)

        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)


__all__ = ["JsonLoggerFactory"]
