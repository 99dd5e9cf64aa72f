"""Config validation errors."""
from mp_commandkit.kernel.errors import BaseError


class ConfigError(BaseError):
    """Dispatcher configuration could not be read or is invalid."""
    default_code = "config_error"


class InvalidSettingValueError(ConfigError):
    """A ``DispatchSettings`` value (or its ``COMMANDKIT_*`` variable) is invalid."""
    default_code = "invalid_setting_value"

    def __init__(self, setting: str, value: object, reason: str) -> None:
        super().__init__(f"{setting}={value!r}: {reason}", setting=setting)
        self.setting = setting
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError"]
