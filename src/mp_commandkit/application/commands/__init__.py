"""Application commands – data model, request shapes, parser and contexts."""
from mp_commandkit.application.commands.context import (
    Context,
    ContextParameters,
    Execute,
    MiddlewareContext,
    RunCommand,
)
from mp_commandkit.application.commands.models import (
    INTERACTION_MODES,
    Command,
    CommandDefinition,
    CommandMetadata,
    ExecutionMode,
    Handler,
    LoadedCommand,
    LoadedMiddleware,
    Middleware,
    MiddlewareFunction,
    OptionType,
    ResolvedCommand,
    define_command,
    define_middleware,
)
from mp_commandkit.application.commands.parser import (
    CommandOptions,
    InteractionOptions,
    MessageCommandOptions,
    MessageCommandParser,
    ParsedMessageCommand,
)
from mp_commandkit.application.commands.requests import (
    Interaction,
    InteractionKind,
    Mentions,
    Message,
    Request,
    Responder,
    get_execution_mode,
    is_interaction_source,
    is_message_source,
)

__all__ = [
    "Command",
    "CommandDefinition",
    "CommandMetadata",
    "CommandOptions",
    "Context",
    "ContextParameters",
    "Execute",
    "ExecutionMode",
    "Handler",
    "INTERACTION_MODES",
    "Interaction",
    "InteractionKind",
    "InteractionOptions",
    "LoadedCommand",
    "LoadedMiddleware",
    "Mentions",
    "Message",
    "MessageCommandOptions",
    "MessageCommandParser",
    "Middleware",
    "MiddlewareContext",
    "MiddlewareFunction",
    "OptionType",
    "ParsedMessageCommand",
    "Request",
    "Responder",
    "ResolvedCommand",
    "RunCommand",
    "define_command",
    "define_middleware",
    "get_execution_mode",
    "is_interaction_source",
    "is_message_source",
]
