"""Observability – structured logging helpers."""
from mp_commandkit.observability.logging.factory import JsonLoggerFactory
from mp_commandkit.observability.logging.processors import EnvironmentProcessor, get_logger

__all__ = ["EnvironmentProcessor", "JsonLoggerFactory", "get_logger"]
