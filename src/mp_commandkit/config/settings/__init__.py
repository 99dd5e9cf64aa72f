"""Config settings."""
from mp_commandkit.config.settings.dispatch import DispatchSettings

__all__ = ["DispatchSettings"]
