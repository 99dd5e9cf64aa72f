"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DispatchError                 (dispatch.py)
    │   ├── CommandNotFoundError
    │   ├── MissingHandlerError
    │   ├── UnknownExecutionModeError
    │   ├── NoEnvironmentError
    │   ├── ExecutionErrorAlreadySetError
    │   ├── EnvironmentTypeNotSetError
    │   ├── MissingOptionError
    │   └── PluginError
    └── ConfigError                   (mp_commandkit.config.validation)
"""

from mp_commandkit.kernel.errors.base import BaseError, error_fields
from mp_commandkit.kernel.errors.dispatch import (
    CommandNotFoundError,
    DispatchError,
    EnvironmentTypeNotSetError,
    ExecutionErrorAlreadySetError,
    MissingHandlerError,
    MissingOptionError,
    NoEnvironmentError,
    PluginError,
    UnknownExecutionModeError,
)

__all__ = [
    "BaseError",
    "CommandNotFoundError",
    "DispatchError",
    "EnvironmentTypeNotSetError",
    "ExecutionErrorAlreadySetError",
    "MissingHandlerError",
    "MissingOptionError",
    "NoEnvironmentError",
    "PluginError",
    "UnknownExecutionModeError",
    "error_fields",
]
