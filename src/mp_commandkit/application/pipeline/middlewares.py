"""Application pipeline – built-in middlewares."""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from mp_commandkit.application.commands import LoadedMiddleware, MiddlewareContext
from mp_commandkit.application.pipeline.middleware import CommandMiddleware
from mp_commandkit.kernel.signals import stop_middlewares
from mp_commandkit.observability.logging import get_logger

PERMISSIONS_MIDDLEWARE_ID = "mp_commandkit:permissions"

_log = get_logger(__name__)

_CASING = re.compile(r"([a-z])([A-Z])|([A-Z]+)([A-Z][a-z])")


def humanize_permission(name: str) -> str:
    """``KickMembers`` → ``Kick Members``."""
    return _CASING.sub(lambda m: f"{m.group(1) or m.group(3)} {m.group(2) or m.group(4)}", name)


def format_list(items: Sequence[str]) -> str:
    """English conjunction list: ``a``, ``a and b``, ``a, b, and c``."""
    if len(items) <= 1:
        return "".join(items)
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def _missing(granted: frozenset[str] | None, required: Iterable[str]) -> list[str]:
    if granted is None:
        return []
    return [humanize_permission(p) for p in required if p not in granted]


def _describe(missing: list[str], template: str) -> str:
    word = "permission" if len(missing) == 1 else "permissions"
    return template.format(perms=format_list([f"`{p}`" for p in missing]), word=word)


class PermissionsMiddleware(CommandMiddleware):
    """Rejects the dispatch when the member or the bot lacks a declared permission."""

    async def before_execute(self, ctx: MiddlewareContext) -> None:
        if ctx.is_autocomplete():
            return

        metadata = ctx.command.metadata
        if not metadata.user_permissions and not metadata.bot_permissions:
            return

        source = ctx.source
        missing_user = _missing(source.member_permissions, metadata.user_permissions)
        missing_bot = _missing(source.bot_permissions, metadata.bot_permissions)
        if not missing_user and not missing_bot:
            return

        lines: list[str] = []
        if missing_user:
            lines.append(_describe(
                missing_user,
                "- You must have the {perms} {word} to be able to run this command.",
            ))
        if missing_bot:
            lines.append(_describe(
                missing_bot,
                "- I must have the {perms} {word} to be able to execute this command.",
            ))

        _log.info(
            "permissions.denied",
            command=ctx.command.name,
            missing_user=missing_user,
            missing_bot=missing_bot,
        )
        ctx.cancel()
        await ctx.reply("\n".join([":x: Missing permissions!", *lines]), ephemeral=True)
        stop_middlewares()


permissions_middleware = LoadedMiddleware.from_object(
    PermissionsMiddleware(),
    id=PERMISSIONS_MIDDLEWARE_ID,
    name="permissions",
)


__all__ = [
    "PERMISSIONS_MIDDLEWARE_ID",
    "PermissionsMiddleware",
    "format_list",
    "humanize_permission",
    "permissions_middleware",
]
