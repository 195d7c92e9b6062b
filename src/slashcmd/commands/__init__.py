"""
Slash command system.

Loads built-in, project and personal commands into one registry, validates
every definition, and keeps the registry live with debounced hot reload.
"""

from slashcmd.commands.builtin_commands import BuiltinCommandLoader
from slashcmd.commands.command_service import CommandService
from slashcmd.commands.custom_command_loader import CustomCommandLoader
from slashcmd.commands.dispatch import (
    CommandInvocation,
    LeafCommand,
    ParentCommand,
    classify,
    execute_async,
    get_autocomplete_suggestions,
    get_completions_async,
    resolve_invocation,
)
from slashcmd.commands.registry import CommandRegistry
from slashcmd.commands.types import (
    AiPromptActionReturn,
    CommandContext,
    CommandMetadata,
    CommandScope,
    CommandSourceFormat,
    MessageActionReturn,
    OpenDialogActionReturn,
    ScopeDirectoryConfig,
    SlashCommand,
    ToolActionReturn,
)
from slashcmd.commands.validator import CommandValidationResult, CommandValidator

__all__ = [
    "AiPromptActionReturn",
    "BuiltinCommandLoader",
    "CommandContext",
    "CommandInvocation",
    "CommandMetadata",
    "CommandRegistry",
    "CommandScope",
    "CommandService",
    "CommandSourceFormat",
    "CommandValidationResult",
    "CommandValidator",
    "CustomCommandLoader",
    "LeafCommand",
    "MessageActionReturn",
    "OpenDialogActionReturn",
    "ParentCommand",
    "ScopeDirectoryConfig",
    "SlashCommand",
    "ToolActionReturn",
    "classify",
    "execute_async",
    "get_autocomplete_suggestions",
    "get_completions_async",
    "resolve_invocation",
]
