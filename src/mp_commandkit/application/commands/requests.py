"""Application commands – neutral inbound request shapes.

The chat-platform client lives outside this package; a transport adapter
converts each platform object into an :class:`Interaction` or a
:class:`Message` before handing it to the dispatcher.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol

from mp_commandkit.application.commands.models import ExecutionMode


class InteractionKind(str, Enum):
    CHAT_INPUT = "chat_input"
    AUTOCOMPLETE = "autocomplete"
    MESSAGE_CONTEXT_MENU = "message_context_menu"
    USER_CONTEXT_MENU = "user_context_menu"
    COMPONENT = "component"


_MODE_BY_KIND: dict[InteractionKind, ExecutionMode] = {
    InteractionKind.CHAT_INPUT: ExecutionMode.CHAT_INPUT,
    InteractionKind.AUTOCOMPLETE: ExecutionMode.AUTOCOMPLETE,
    InteractionKind.MESSAGE_CONTEXT_MENU: ExecutionMode.MESSAGE_CONTEXT_MENU,
    InteractionKind.USER_CONTEXT_MENU: ExecutionMode.USER_CONTEXT_MENU,
}


class Responder(Protocol):
    """Port: send a reply through the platform's reply channel."""

    async def __call__(self, content: str, *, ephemeral: bool = False) -> Any: ...


@dataclasses.dataclass(frozen=True)
class Mentions:
    """Entities mentioned in a message, keyed by id."""

    users: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    channels: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    roles: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class Interaction:
    """Structured request: command name and options arrive pre-parsed."""

    kind: InteractionKind
    command_name: str | None = None
    options: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    subcommand: str | None = None
    subcommand_group: str | None = None
    guild_id: str | None = None
    channel_id: str | None = None
    user_id: str | None = None
    member_permissions: frozenset[str] | None = None
    bot_permissions: frozenset[str] | None = None
    responder: Responder | None = dataclasses.field(default=None, compare=False, repr=False)

    @property
    def is_command_like(self) -> bool:
        return self.kind in _MODE_BY_KIND and bool(self.command_name)

    async def reply(self, content: str, *, ephemeral: bool = False) -> Any:
        if self.responder is None:
            return None
        return await self.responder(content, ephemeral=ephemeral)


@dataclasses.dataclass(frozen=True)
class Message:
    """Free-text request: the command is parsed out of ``content``."""

    content: str
    author_id: str | None = None
    author_is_bot: bool = False
    guild_id: str | None = None
    channel_id: str | None = None
    mentions: Mentions = dataclasses.field(default_factory=Mentions)
    attachments: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    member_permissions: frozenset[str] | None = None
    bot_permissions: frozenset[str] | None = None
    partial: bool = False
    edited: bool = False
    responder: Responder | None = dataclasses.field(default=None, compare=False, repr=False)

    async def reply(self, content: str, *, ephemeral: bool = False) -> Any:
        if self.responder is None:
            return None
        return await self.responder(content, ephemeral=ephemeral)


type Request = Interaction | Message


def is_message_source(source: Request) -> bool:
    return isinstance(source, Message)


def is_interaction_source(source: Request) -> bool:
    return isinstance(source, Interaction)


def get_execution_mode(source: Request) -> ExecutionMode | None:
    """Classify *source* into the execution mode its handler is keyed by.

    Returns ``None`` for interactions that are not command-like (components).
    """
    if isinstance(source, Message):
        return ExecutionMode.MESSAGE
    return _MODE_BY_KIND.get(source.kind)


__all__ = [
    "Interaction",
    "InteractionKind",
    "Mentions",
    "Message",
    "Request",
    "Responder",
    "get_execution_mode",
    "is_interaction_source",
    "is_message_source",
]
