"""Application – Dispatcher, the entry points a chat client calls into."""
from __future__ import annotations

from typing import Any

from mp_commandkit.application.analytics import AnalyticsEngine
from mp_commandkit.application.commands import (
    ExecutionMode,
    Interaction,
    Message,
    Request,
    ResolvedCommand,
    get_execution_mode,
)
from mp_commandkit.application.pipeline import CommandRunner, RunCommandOptions
from mp_commandkit.application.plugins import PluginRuntime
from mp_commandkit.application.resolver import CommandLoader, CommandResolver, PrefixProvider
from mp_commandkit.config import DispatchSettings
from mp_commandkit.kernel.errors import error_fields
from mp_commandkit.observability.events import EventEmitter
from mp_commandkit.observability.logging import JsonLoggerFactory, get_logger

_log = get_logger(__name__)


class Dispatcher:
    """Wires resolver, runner, plugins and analytics for one bot process.

    Usage::

        dispatcher = Dispatcher(loader=StaticCommandLoader([ping]))
        await dispatcher.load_commands()
        await dispatcher.handle_interaction(interaction)

    The ``handle_*`` methods never raise for an unmatched request: they
    return ``None``. Errors escaping the pipeline are logged and swallowed.
    """

    def __init__(
        self,
        settings: DispatchSettings | None = None,
        *,
        loader: CommandLoader | None = None,
        prefix_provider: PrefixProvider | None = None,
        plugins: PluginRuntime | None = None,
        analytics: AnalyticsEngine | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self.settings = settings or DispatchSettings()
        self.plugins = plugins if plugins is not None else PluginRuntime()
        self.analytics = analytics if analytics is not None else AnalyticsEngine()
        self.events = emitter if emitter is not None else EventEmitter()
        self.resolver = CommandResolver(
            self.settings, loader=loader, prefix_provider=prefix_provider
        )
        self.runner = CommandRunner(
            self.resolver,
            plugins=self.plugins,
            analytics=self.analytics,
            emitter=self.events,
        )

    @classmethod
    def from_env(
        cls,
        *,
        dotenv_path: str = ".env",
        configure_logging: bool = True,
        **kwargs: Any,
    ) -> "Dispatcher":
        """Build a dispatcher from ``COMMANDKIT_*`` variables (``.env`` first)."""
        settings = DispatchSettings.from_env(dotenv_path)
        if configure_logging:
            JsonLoggerFactory.configure(settings.log_level, development=settings.development)
        return cls(settings, **kwargs)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def load_commands(self) -> None:
        await self.resolver.load()

    async def reload_commands(self) -> None:
        await self.resolver.reload()

    @staticmethod
    def get_execution_mode(source: Request) -> ExecutionMode | None:
        return get_execution_mode(source)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_interaction(self, interaction: Interaction) -> Any:
        handled = await self.plugins.execute(
            lambda runtime, plugin: plugin.on_before_interaction(runtime, interaction)
        )
        if handled or not interaction.is_command_like:
            return None

        resolved = await self.resolver.prepare_command_run(interaction)
        if resolved is None:
            return None
        return await self._run(resolved, interaction)

    async def handle_message(self, message: Message) -> Any:
        handled = await self.plugins.execute(
            lambda runtime, plugin: plugin.on_before_message_command(runtime, message)
        )
        if handled or self._ignored(message):
            return None

        resolved = await self.resolver.prepare_command_run(message)
        if resolved is None:
            return None
        return await self._run(resolved, message)

    async def handle_message_update(self, old: Message, new: Message) -> Any:
        handled = await self.plugins.execute(
            lambda runtime, plugin: plugin.on_before_message_update_command(runtime, old, new)
        )
        if handled or old.partial or self._ignored(new):
            return None

        resolved = await self.resolver.prepare_command_run(new)
        if resolved is None:
            return None
        return await self._run(resolved, new)

    async def run_command(
        self,
        resolved: ResolvedCommand,
        source: Request,
        options: RunCommandOptions | None = None,
    ) -> Any:
        """Run *resolved* directly; errors propagate to the caller."""
        return await self.runner.run_command(resolved, source, options)

    def _ignored(self, message: Message) -> bool:
        return message.partial or (self.settings.ignore_bots and message.author_is_bot)

    async def _run(self, resolved: ResolvedCommand, source: Request) -> Any:
        try:
            return await self.runner.run_command(resolved, source)
        except Exception as exc:  # noqa: BLE001
            _log.exception("dispatch.failed", command=resolved.command.name, **error_fields(exc))
            return None


__all__ = ["Dispatcher"]
