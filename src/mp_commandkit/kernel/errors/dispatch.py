"""Dispatch errors – failures raised by the resolver, runner and contexts."""

from __future__ import annotations

from typing import Any

from mp_commandkit.kernel.errors.base import BaseError


class DispatchError(BaseError):
    """A dispatch could not proceed because of a programming or setup error."""

    default_code = "dispatch_error"


class CommandNotFoundError(DispatchError):
    """A command referenced by name (e.g. a forward target) is not loaded."""

    default_code = "command_not_found"

    def __init__(self, command_name: str, **kwargs: Any) -> None:
        super().__init__(f"Command '{command_name}' not found", command=command_name, **kwargs)
        self.command_name = command_name


class MissingHandlerError(DispatchError):
    """The command has no handler for the requested execution mode."""

    default_code = "missing_handler"

    def __init__(self, command_name: str, mode: str, **kwargs: Any) -> None:
        super().__init__(
            f"Command '{command_name}' has no handler for '{mode}'",
            command=command_name,
            mode=mode,
            **kwargs,
        )
        self.command_name = command_name
        self.mode = mode


class UnknownExecutionModeError(DispatchError):
    """A handler key or override is not one of the supported execution modes."""

    default_code = "unknown_execution_mode"

    def __init__(self, mode: object, **kwargs: Any) -> None:
        super().__init__(f"Unknown execution mode {mode!r}", mode=str(mode), **kwargs)
        self.mode = mode


class NoEnvironmentError(DispatchError):
    """Strict environment lookup happened outside any dispatch scope."""

    default_code = "no_environment"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message
            or "No execution environment found. Make sure you are inside a command handler.",
            **kwargs,
        )


class ExecutionErrorAlreadySetError(DispatchError):
    """The environment's captured-error slot may only be written once."""

    default_code = "execution_error_already_set"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("Execution error already set", **kwargs)


class EnvironmentTypeNotSetError(DispatchError):
    """``ExecutionEnvironment.get_type`` was called before ``set_type``."""

    default_code = "environment_type_not_set"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("Environment type not set", **kwargs)


class MissingOptionError(DispatchError):
    """A required command option was not supplied by the request."""

    default_code = "missing_option"

    def __init__(self, name: str, kind: str = "Option", **kwargs: Any) -> None:
        super().__init__(f'{kind} "{name}" is required', option=name, **kwargs)
        self.name = name


class PluginError(DispatchError):
    """A runtime plugin could not be (un)registered or (de)activated."""

    default_code = "plugin_error"

    def __init__(self, plugin_name: str, message: str, **kwargs: Any) -> None:
        super().__init__(message, plugin=plugin_name, **kwargs)
        self.plugin_name = plugin_name


__all__ = [
    "CommandNotFoundError",
    "DispatchError",
    "EnvironmentTypeNotSetError",
    "ExecutionErrorAlreadySetError",
    "MissingHandlerError",
    "MissingOptionError",
    "NoEnvironmentError",
    "PluginError",
    "UnknownExecutionModeError",
]
