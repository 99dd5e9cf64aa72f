"""Config validation errors."""
from mp_commandkit.config.validation.errors import ConfigError, InvalidSettingValueError

__all__ = ["ConfigError", "InvalidSettingValueError"]
