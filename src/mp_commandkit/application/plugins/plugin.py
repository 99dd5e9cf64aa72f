"""Application plugins – RuntimePlugin base class."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

if TYPE_CHECKING:
    from mp_commandkit.application.commands import Interaction, Message, Request, ResolvedCommand
    from mp_commandkit.application.plugins.runtime import PluginRuntime
    from mp_commandkit.context import ExecutionEnvironment


class RuntimePlugin:
    """Extension point invoked around resolution and execution.

    Every hook is a no-op by default; subclasses override what they need.
    A ``on_before_*`` hook returning a truthy value (or calling
    :meth:`PluginRuntime.capture`) marks the request as handled and the
    dispatcher stops processing it.
    """

    name: str = "plugin"

    def __init__(self, name: str | None = None) -> None:
        if name is not None:
            self.name = name

    async def activate(self, runtime: "PluginRuntime") -> None:
        return None

    async def deactivate(self, runtime: "PluginRuntime") -> None:
        return None

    async def on_before_interaction(self, runtime: "PluginRuntime", interaction: "Interaction") -> Any:
        return None

    async def on_before_message_command(self, runtime: "PluginRuntime", message: "Message") -> Any:
        return None

    async def on_before_message_update_command(
        self, runtime: "PluginRuntime", old: "Message", new: "Message"
    ) -> Any:
        return None

    async def execute_command(
        self,
        runtime: "PluginRuntime",
        env: "ExecutionEnvironment",
        source: "Request",
        resolved: "ResolvedCommand",
        execute: Callable[[], Awaitable[Any]],
    ) -> bool:
        """Return ``True`` when the plugin invoked (or replaced) *execute* itself."""
        return False

    async def on_after_command(self, runtime: "PluginRuntime", env: "ExecutionEnvironment") -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["RuntimePlugin"]
