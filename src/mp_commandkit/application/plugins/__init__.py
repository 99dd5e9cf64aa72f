"""Application plugins – runtime extension points around dispatch."""
from mp_commandkit.application.plugins.plugin import RuntimePlugin
from mp_commandkit.application.plugins.runtime import PluginCall, PluginRuntime

__all__ = ["PluginCall", "PluginRuntime", "RuntimePlugin"]
