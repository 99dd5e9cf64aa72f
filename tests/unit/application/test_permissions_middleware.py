"""Unit tests for the built-in permissions middleware."""

from __future__ import annotations

import asyncio
from typing import Any

from mp_commandkit.application.commands import CommandMetadata, Context, InteractionKind, define_command
from mp_commandkit.application.dispatcher import Dispatcher
from mp_commandkit.application.pipeline import (
    PERMISSIONS_MIDDLEWARE_ID,
    cancelled_result,
    format_list,
    humanize_permission,
    permissions_middleware,
)
from mp_commandkit.testing import RecordingResponder, StaticCommandLoader, make_interaction


def moderation_dispatcher(record: list[str]) -> Dispatcher:
    async def kick(ctx: Context) -> str:
        record.append("kick")
        return "kicked"

    async def suggest(ctx: Context) -> None:
        record.append("suggest")

    command = define_command(
        "kick",
        chat_input=kick,
        autocomplete=suggest,
        metadata=CommandMetadata(
            user_permissions=("KickMembers", "BanMembers"),
            bot_permissions=("KickMembers",),
        ),
    )
    dispatcher = Dispatcher(loader=StaticCommandLoader([command]))
    asyncio.run(dispatcher.load_commands())
    return dispatcher


class TestFormatting:
    def test_humanize_permission(self) -> None:
        assert humanize_permission("KickMembers") == "Kick Members"
        assert humanize_permission("ManageGuildExpressions") == "Manage Guild Expressions"
        assert humanize_permission("Administrator") == "Administrator"

    def test_format_list(self) -> None:
        assert format_list([]) == ""
        assert format_list(["a"]) == "a"
        assert format_list(["a", "b"]) == "a and b"
        assert format_list(["a", "b", "c"]) == "a, b, and c"

    def test_registered_under_fixed_id(self) -> None:
        assert permissions_middleware.id == PERMISSIONS_MIDDLEWARE_ID
        assert permissions_middleware.before_execute is not None


class TestPermissionsMiddleware:
    def test_allows_when_permissions_present(self) -> None:
        record: list[str] = []
        dispatcher = moderation_dispatcher(record)
        interaction = make_interaction(
            "kick",
            member_permissions={"KickMembers", "BanMembers"},
            bot_permissions={"KickMembers"},
        )
        assert asyncio.run(dispatcher.handle_interaction(interaction)) == "kicked"
        assert record == ["kick"]

    def test_rejects_missing_member_permission(self) -> None:
        record: list[str] = []
        responder = RecordingResponder()
        dispatcher = moderation_dispatcher(record)
        interaction = make_interaction(
            "kick",
            member_permissions={"KickMembers"},
            bot_permissions={"KickMembers"},
            responder=responder,
        )
        result: Any = asyncio.run(dispatcher.handle_interaction(interaction))
        assert result == cancelled_result()
        assert record == []
        [reply] = responder.replies
        assert reply.ephemeral is True
        assert reply.content == (
            ":x: Missing permissions!\n"
            "- You must have the `Ban Members` permission to be able to run this command."
        )

    def test_rejects_missing_bot_permissions(self) -> None:
        responder = RecordingResponder()
        dispatcher = moderation_dispatcher([])
        interaction = make_interaction(
            "kick",
            member_permissions=set(),
            bot_permissions=set(),
            responder=responder,
        )
        asyncio.run(dispatcher.handle_interaction(interaction))
        assert responder.contents == [
            ":x: Missing permissions!\n"
            "- You must have the `Kick Members` and `Ban Members` permissions to be able to run this command.\n"
            "- I must have the `Kick Members` permission to be able to execute this command."
        ]

    def test_unknown_permission_sets_are_not_checked(self) -> None:
        record: list[str] = []
        dispatcher = moderation_dispatcher(record)
        assert asyncio.run(dispatcher.handle_interaction(make_interaction("kick"))) == "kicked"

    def test_autocomplete_is_skipped(self) -> None:
        record: list[str] = []
        dispatcher = moderation_dispatcher(record)
        interaction = make_interaction(
            "kick",
            kind=InteractionKind.AUTOCOMPLETE,
            member_permissions=set(),
            bot_permissions=set(),
        )
        asyncio.run(dispatcher.handle_interaction(interaction))
        assert record == ["suggest"]
