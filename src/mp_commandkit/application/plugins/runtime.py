"""Application plugins – PluginRuntime."""
from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, NoReturn

from mp_commandkit.application.plugins.plugin import RuntimePlugin
from mp_commandkit.kernel.errors import PluginError
from mp_commandkit.kernel.signals import ControlSignal, PluginCaptureHandle
from mp_commandkit.observability.logging import get_logger

_log = get_logger(__name__)

PluginCall = Callable[["PluginRuntime", RuntimePlugin], Awaitable[Any] | Any]


class PluginRuntime:
    """Holds the registered plugins and fans hook calls out to them.

    Plugins are called in registration order.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, RuntimePlugin] = {}

    @property
    def plugins(self) -> list[RuntimePlugin]:
        return list(self._plugins.values())

    def get_plugin(self, name: str) -> RuntimePlugin | None:
        return self._plugins.get(name)

    async def register_plugin(self, plugin: RuntimePlugin) -> None:
        """Activate and register *plugin*; its name must be unique."""
        if plugin.name in self._plugins:
            raise PluginError(plugin.name, f'Plugin "{plugin.name}" already exists')
        try:
            await plugin.activate(self)
        except Exception as exc:
            raise PluginError(plugin.name, f'Failed to activate plugin "{plugin.name}": {exc!r}') from exc
        self._plugins[plugin.name] = plugin
        _log.info("plugin.registered", plugin=plugin.name)

    async def soft_register_plugin(self, plugin: RuntimePlugin) -> bool:
        """Register *plugin* unless its name is taken; returns whether it was added."""
        if plugin.name in self._plugins:
            return False
        await self.register_plugin(plugin)
        return True

    async def unregister_plugin(self, plugin: RuntimePlugin) -> None:
        if plugin.name not in self._plugins:
            raise PluginError(plugin.name, f'Plugin "{plugin.name}" does not exist')
        del self._plugins[plugin.name]
        try:
            await plugin.deactivate(self)
        except Exception as exc:
            raise PluginError(plugin.name, f'Failed to deactivate plugin "{plugin.name}": {exc!r}') from exc
        _log.info("plugin.unregistered", plugin=plugin.name)

    async def unregister_all_plugins(self) -> None:
        for plugin in list(self._plugins.values()):
            await self.unregister_plugin(plugin)

    def capture(self) -> NoReturn:
        """Claim the current hook call; :meth:`execute` then returns ``True``."""
        raise PluginCaptureHandle()

    async def execute(self, fn: PluginCall) -> bool:
        """Call *fn* for every plugin.

        Returns ``True`` as soon as a plugin captures the call, otherwise
        whether any plugin returned a truthy value. A failing plugin is logged
        and the remaining plugins still run; any other control signal
        propagates unlogged.
        """
        handled = False
        for plugin in list(self._plugins.values()):
            try:
                result = fn(self, plugin)
                if inspect.isawaitable(result):
                    result = await result
            except PluginCaptureHandle:
                return True
            except ControlSignal:
                raise
            except Exception:  # noqa: BLE001
                _log.exception("plugin.failed", plugin=plugin.name)
                continue
            handled = handled or bool(result)
        return handled


__all__ = ["PluginCall", "PluginRuntime"]
