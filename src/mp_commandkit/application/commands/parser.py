"""Application commands – free-text message command parser and option readers."""
from __future__ import annotations

import abc
import dataclasses
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from mp_commandkit.application.commands.models import OptionType
from mp_commandkit.application.commands.requests import Interaction, Message
from mp_commandkit.kernel.errors import MissingOptionError
from mp_commandkit.kernel.signals import InvalidPrefix

SchemaResolver = Callable[[str], Mapping[str, OptionType]]

_USER_MENTION = re.compile(r"[<@!>]")
_CHANNEL_MENTION = re.compile(r"[<#>]")
_ROLE_MENTION = re.compile(r"[<@&>]")


@dataclasses.dataclass(frozen=True)
class ParsedMessageCommand:
    command: str
    options: dict[str, Any]
    subcommand: str | None = None
    subcommand_group: str | None = None


class MessageCommandParser:
    """Splits ``<prefix><command>[:group][:sub] key:value ...`` messages.

    Parsing is lazy and memoised; a message without an accepted prefix raises
    :class:`~mp_commandkit.kernel.signals.InvalidPrefix`.
    """

    def __init__(
        self,
        message: Message,
        prefixes: Sequence[str] | re.Pattern[str],
        schema: SchemaResolver,
    ) -> None:
        self.message = message
        self._prefixes = prefixes
        self._schema = schema
        self._parsed: ParsedMessageCommand | None = None
        self._options: MessageCommandOptions | None = None
        self._args: list[str] = []

    def get_prefix(self) -> str | None:
        content = self.message.content
        if isinstance(self._prefixes, re.Pattern):
            match = self._prefixes.match(content)
            return match.group(0) if match is not None else None
        for prefix in self._prefixes:
            if prefix and content.startswith(prefix):
                return prefix
        return None

    def parse(self) -> ParsedMessageCommand:
        if self._parsed is not None:
            return self._parsed

        prefix = self.get_prefix()
        if prefix is None:
            raise InvalidPrefix()

        parts = self.message.content[len(prefix):].split()
        token = parts[0] if parts else ""
        self._args = parts[1:]

        command, _, path = token.partition(":")
        subcommand_group: str | None = None
        subcommand: str | None = None
        if path:
            segments = path.split(":")
            if len(segments) == 1:
                subcommand = segments[0] or None
            else:
                subcommand_group = segments[0] or None
                subcommand = segments[1] or None

        schema = self._schema(" ".join(p for p in (command, subcommand_group, subcommand) if p))
        options: dict[str, Any] = {}
        for arg in self._args:
            name, sep, raw = arg.partition(":")
            if not sep or name not in schema:
                continue
            try:
                value = self._convert(schema[name], raw)
            except ValueError:
                continue
            if value is not None:
                options[name] = value

        self._parsed = ParsedMessageCommand(
            command=command,
            options=options,
            subcommand=subcommand,
            subcommand_group=subcommand_group,
        )
        return self._parsed

    def _convert(self, option_type: OptionType, raw: str) -> Any:  # noqa: PLR0911
        match option_type:
            case OptionType.BOOLEAN:
                return raw == "true"
            case OptionType.INTEGER:
                return int(raw, 10)
            case OptionType.NUMBER:
                return float(raw)
            case OptionType.STRING:
                return raw
            case OptionType.USER:
                return self.message.mentions.users.get(_USER_MENTION.sub("", raw))
            case OptionType.CHANNEL:
                return self.message.mentions.channels.get(_CHANNEL_MENTION.sub("", raw))
            case OptionType.ROLE:
                return self.message.mentions.roles.get(_ROLE_MENTION.sub("", raw))
            case OptionType.ATTACHMENT:
                return self.message.attachments.get(raw)
        return None

    def get_args(self) -> list[str]:
        self.parse()
        return list(self._args)

    def get_command(self) -> str:
        return self.parse().command

    def get_subcommand(self) -> str | None:
        return self.parse().subcommand

    def get_subcommand_group(self) -> str | None:
        return self.parse().subcommand_group

    def get_full_command(self) -> str:
        parsed = self.parse()
        return " ".join(
            p for p in (parsed.command, parsed.subcommand_group, parsed.subcommand) if p
        )

    def get_option(self, name: str) -> Any:
        return self.parse().options.get(name)

    @property
    def options(self) -> "MessageCommandOptions":
        if self._options is None:
            self._options = MessageCommandOptions(self)
        return self._options


class CommandOptions(abc.ABC):
    """Typed option getters shared by both request shapes.

    The getters do not convert or check types: each returns the stored value
    as is (``None`` when absent). Message options are typed by the parser
    from the command's option schema; interaction options arrive typed from
    the platform.
    """

    @abc.abstractmethod
    def _lookup(self, name: str) -> Any: ...

    @abc.abstractmethod
    def _subcommand(self) -> str | None: ...

    @abc.abstractmethod
    def _subcommand_group(self) -> str | None: ...

    def _require(self, name: str, required: bool) -> Any:
        value = self._lookup(name)
        if required and value is None:
            raise MissingOptionError(name)
        return value

    def get(self, name: str, required: bool = False) -> Any:
        return self._require(name, required)

    def get_string(self, name: str, required: bool = False) -> str | None:
        return self._require(name, required)

    def get_integer(self, name: str, required: bool = False) -> int | None:
        return self._require(name, required)

    def get_number(self, name: str, required: bool = False) -> float | None:
        return self._require(name, required)

    def get_boolean(self, name: str, required: bool = False) -> bool | None:
        return self._require(name, required)

    def get_user(self, name: str, required: bool = False) -> Any:
        return self._require(name, required)

    def get_channel(self, name: str, required: bool = False) -> Any:
        return self._require(name, required)

    def get_role(self, name: str, required: bool = False) -> Any:
        return self._require(name, required)

    def get_attachment(self, name: str, required: bool = False) -> Any:
        return self._require(name, required)

    def get_subcommand(self, required: bool = False) -> str | None:
        sub = self._subcommand()
        if required and sub is None:
            raise MissingOptionError("subcommand", kind="Subcommand")
        return sub

    def get_subcommand_group(self, required: bool = False) -> str | None:
        group = self._subcommand_group()
        if required and group is None:
            raise MissingOptionError("subcommand group", kind="Subcommand group")
        return group


class MessageCommandOptions(CommandOptions):
    """Options of a message command; a message without prefix has none."""

    def __init__(self, parser: MessageCommandParser) -> None:
        self._parser = parser

    def _parsed(self) -> ParsedMessageCommand | None:
        try:
            return self._parser.parse()
        except InvalidPrefix:
            return None

    def _lookup(self, name: str) -> Any:
        parsed = self._parsed()
        return parsed.options.get(name) if parsed is not None else None

    def _subcommand(self) -> str | None:
        parsed = self._parsed()
        return parsed.subcommand if parsed is not None else None

    def _subcommand_group(self) -> str | None:
        parsed = self._parsed()
        return parsed.subcommand_group if parsed is not None else None


class InteractionOptions(CommandOptions):
    def __init__(self, interaction: Interaction) -> None:
        self._interaction = interaction

    def _lookup(self, name: str) -> Any:
        return self._interaction.options.get(name)

    def _subcommand(self) -> str | None:
        return self._interaction.subcommand

    def _subcommand_group(self) -> str | None:
        return self._interaction.subcommand_group


__all__ = [
    "CommandOptions",
    "InteractionOptions",
    "MessageCommandOptions",
    "MessageCommandParser",
    "ParsedMessageCommand",
    "SchemaResolver",
]
