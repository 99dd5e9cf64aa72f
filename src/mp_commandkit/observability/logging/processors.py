"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class EnvironmentProcessor:
    """structlog processor that injects dispatch details from the ambient
    :class:`~mp_commandkit.context.ExecutionEnvironment`.

    Injects the following fields when a dispatch is active:

    * ``command`` (the current command name)
    * ``execution_mode`` (only when set)
    * ``marker`` (only once the command body started)

    Usage::

        import structlog
        from mp_commandkit.observability.logging import EnvironmentProcessor

        structlog.configure(processors=[EnvironmentProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        from mp_commandkit.context.carrier import get_environment

        env = get_environment()
        if env is None:
            return event_dict
        command = env.variables.get("current_command_name")
        if command is not None:
            event_dict.setdefault("command", command)
        mode = env.variables.get("exec_handler_kind")
        if mode is not None:
            event_dict.setdefault("execution_mode", str(mode))
        marker = env.get_marker()
        if marker:
            event_dict.setdefault("marker", marker)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["EnvironmentProcessor", "get_logger"]
