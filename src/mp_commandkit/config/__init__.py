"""Configuration – dispatcher settings and their validation errors."""
from mp_commandkit.config.settings import DispatchSettings
from mp_commandkit.config.validation import ConfigError, InvalidSettingValueError

__all__ = ["ConfigError", "DispatchSettings", "InvalidSettingValueError"]
