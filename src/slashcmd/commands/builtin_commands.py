"""Built-in slash commands shipped with the tool."""

import inspect
import time

from slashcmd.commands.types import (
    CommandContext,
    CommandMetadata,
    CommandScope,
    ICommandLoader,
    MessageActionReturn,
    OpenDialogActionReturn,
    SlashCommand,
    SlashCommandActionReturn,
    ToolActionReturn,
)

BUILTIN_CATEGORY = "builtin"

SAVE_MEMORY_TOOL_NAME = "save_memory"


def _builtin_metadata(*tags: str) -> CommandMetadata:
    return CommandMetadata(scope=CommandScope.BUILTIN, category=BUILTIN_CATEGORY, tags=frozenset(tags))


def _help_action(context: CommandContext, args: str) -> SlashCommandActionReturn:
    context.ui.set_debug_message("Opening help.")
    return OpenDialogActionReturn(dialog="help")


def _clear_action(context: CommandContext, args: str) -> None:
    context.ui.set_debug_message("Clearing terminal.")
    context.ui.clear()


def _theme_action(context: CommandContext, args: str) -> SlashCommandActionReturn:
    return OpenDialogActionReturn(dialog="theme")


def _memory_show_action(context: CommandContext, args: str) -> SlashCommandActionReturn:
    config = context.services.config
    memory = ""
    if config is not None and hasattr(config, "get_user_memory"):
        memory = config.get_user_memory() or ""

    if not memory.strip():
        return MessageActionReturn(message_type="info", content="Memory is currently empty.")

    return MessageActionReturn(message_type="info", content=f"Current memory content:\n\n---\n{memory}\n---")


def _memory_add_action(context: CommandContext, args: str) -> SlashCommandActionReturn:
    fact = (args or "").strip()
    if not fact:
        return MessageActionReturn(message_type="error", content="Usage: /memory add <text to remember>")

    context.ui.add_item({"type": "info", "text": f'Attempting to save to memory: "{fact}"'}, time.time())
    return ToolActionReturn(tool_name=SAVE_MEMORY_TOOL_NAME, tool_args={"fact": fact})


async def _memory_refresh_action(context: CommandContext, args: str) -> SlashCommandActionReturn:
    config = context.services.config
    if config is None or not hasattr(config, "refresh_memory"):
        return MessageActionReturn(message_type="error", content="Memory refresh is not available.")

    result = config.refresh_memory()
    if inspect.isawaitable(result):
        await result
    return MessageActionReturn(message_type="info", content="Memory refreshed.")


HELP_COMMAND = SlashCommand(
    name="help",
    alt_name="h",
    description="Show available commands and usage information",
    action=_help_action,
    metadata=_builtin_metadata("help"),
)

CLEAR_COMMAND = SlashCommand(
    name="clear",
    description="Clear the screen and conversation history",
    action=_clear_action,
    metadata=_builtin_metadata("ui"),
)

THEME_COMMAND = SlashCommand(
    name="theme",
    description="Change the theme",
    action=_theme_action,
    metadata=_builtin_metadata("ui"),
)

MEMORY_COMMAND = SlashCommand(
    name="memory",
    description="Commands for interacting with memory",
    sub_commands=(
        SlashCommand(
            name="show",
            description="Show the current memory contents",
            action=_memory_show_action,
            metadata=_builtin_metadata("memory"),
        ),
        SlashCommand(
            name="add",
            description="Add content to the memory",
            action=_memory_add_action,
            metadata=_builtin_metadata("memory"),
        ),
        SlashCommand(
            name="refresh",
            description="Refresh the memory from the source",
            action=_memory_refresh_action,
            metadata=_builtin_metadata("memory"),
        ),
    ),
    metadata=_builtin_metadata("memory"),
)


BUILTIN_COMMANDS: tuple[SlashCommand, ...] = (
    CLEAR_COMMAND,
    HELP_COMMAND,
    MEMORY_COMMAND,
    THEME_COMMAND,
)


class BuiltinCommandLoader(ICommandLoader):
    """Loads built-in slash commands."""

    async def load_commands(self) -> list[SlashCommand]:
        """Load all built-in commands."""
        return list(BUILTIN_COMMANDS)
