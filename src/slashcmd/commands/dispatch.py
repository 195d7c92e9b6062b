"""
Command dispatch.

A record with sub-commands is a parent and its own action never runs; any
other record is a leaf. Invocation lines look like ``/name [sub ...] [args]``.
"""

import inspect
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from slashcmd.commands.registry import CommandRegistry
from slashcmd.commands.types import (
    CommandContext,
    MessageActionReturn,
    SlashCommand,
    SlashCommandActionReturn,
)
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

COMMAND_PREFIX = "/"


@dataclass(frozen=True)
class LeafCommand:
    """A command that runs its own action."""

    command: SlashCommand


@dataclass(frozen=True)
class ParentCommand:
    """A command that only groups sub-commands."""

    command: SlashCommand

    @property
    def sub_commands(self) -> tuple[SlashCommand, ...]:
        return self.command.sub_commands


@dataclass(frozen=True)
class CommandInvocation:
    """A resolved invocation line."""

    command: SlashCommand
    path: tuple[str, ...]
    args: str


def classify(command: SlashCommand) -> LeafCommand | ParentCommand:
    if command.sub_commands:
        return ParentCommand(command)
    return LeafCommand(command)


def _find_sub_command(parent: SlashCommand, token: str) -> SlashCommand | None:
    for sub_command in parent.sub_commands:
        if token in sub_command.keys:
            return sub_command
    return None


def resolve_invocation(registry: CommandRegistry, line: str) -> CommandInvocation | None:
    """
    Resolve ``/name [sub ...] [args]`` against the registry.

    The leading slash is optional. Sub-command tokens are consumed as long as
    they match; the rest of the line is passed through as the argument string.

    Returns:
        CommandInvocation, or None if the line names no registered command
    """
    text = line.strip()
    if text.startswith(COMMAND_PREFIX):
        text = text[len(COMMAND_PREFIX):]
    if not text:
        return None

    head, _, rest = text.partition(" ")
    command = registry.get(head)
    if command is None:
        return None

    path = [command.name]
    rest = rest.strip()
    while command.sub_commands and rest:
        token, _, remainder = rest.partition(" ")
        sub_command = _find_sub_command(command, token)
        if sub_command is None:
            break
        command = sub_command
        path.append(sub_command.name)
        rest = remainder.strip()

    return CommandInvocation(command=command, path=tuple(path), args=rest)


async def execute_async(
    invocation: CommandInvocation,
    context: CommandContext,
) -> SlashCommandActionReturn | None:
    """
    Run the resolved command and return its outcome.

    Parents reached without a sub-command produce an info message listing the
    sub-commands; leaves without an action produce an error message.
    """
    target = classify(invocation.command)
    display = COMMAND_PREFIX + " ".join(invocation.path)

    if isinstance(target, ParentCommand):
        listing = "\n".join(
            f"  {sub.name}" + (f" - {sub.description}" if sub.description else "")
            for sub in target.sub_commands
        )
        return MessageActionReturn(
            message_type="info",
            content=f"{display} requires a sub-command:\n{listing}",
        )

    action = target.command.action
    if action is None:
        return MessageActionReturn(message_type="error", content=f"Command {display} has no action.")

    logger.debug("command_dispatched", command=display, has_args=bool(invocation.args))
    outcome = action(context, invocation.args)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome


async def get_completions_async(
    invocation: CommandInvocation,
    context: CommandContext,
) -> list[str]:
    """Argument completions for a resolved command."""
    command = invocation.command
    if command.completion is None:
        if command.sub_commands:
            prefix = invocation.args
            return sorted(key for sub in command.sub_commands for key in sub.keys if key.startswith(prefix))
        return []

    result = command.completion(context, invocation.args)
    if inspect.isawaitable(result):
        result = await result
    return list(result or [])


def get_autocomplete_suggestions(prefix: str, commands: CommandRegistry | Iterable[SlashCommand]) -> list[str]:
    """
    Get autocomplete suggestions for a command prefix.

    Args:
        prefix: The partial command name (without /)
        commands: Registry or commands to search

    Returns:
        Sorted matching names and aliases
    """
    if isinstance(commands, CommandRegistry):
        keys: Sequence[str] = commands.names()
    else:
        keys = [key for command in commands for key in command.keys]

    prefix_lower = prefix.lower()
    return sorted({key for key in keys if key.lower().startswith(prefix_lower)})
