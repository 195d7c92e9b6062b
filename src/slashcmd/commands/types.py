"""Command system type definitions and base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Literal, Mapping, Union

from slashcmd.shared.domain.base_model import BaseDomainModel, lookup


class CommandScope(str, Enum):
    """Provenance tier of a command definition."""

    BUILTIN = "builtin"  # Shipped with the tool
    PROJECT = "project"  # <project>/.gemini/commands
    PERSONAL = "personal"  # ~/.gemini/commands


class CommandSourceFormat(str, Enum):
    """Format of the file a command was loaded from."""

    MODULE = "python"
    JSON = "json"
    YAML = "yaml"
    MARKDOWN = "markdown"


# ---------------------------------------------------------------------------
# Context handed to actions (owned by the host, read-only for the core)
# ---------------------------------------------------------------------------


@dataclass
class CommandServices:
    """Core services and configuration."""

    project_root: Path | None = None
    settings: Any = None
    git: Any = None
    logger: Any = None
    config: Any = None


@dataclass
class CommandUI:
    """UI state and history management hooks."""

    add_item: Callable[[Mapping[str, Any], float], Any] = lambda item, timestamp: None
    clear: Callable[[], Any] = lambda: None
    set_debug_message: Callable[[str], Any] = lambda message: None


@dataclass
class CommandSession:
    """Session-specific data."""

    stats: Any = None


@dataclass
class CommandContext:
    """Context passed to command actions and completions."""

    services: CommandServices = field(default_factory=CommandServices)
    ui: CommandUI = field(default_factory=CommandUI)
    session: CommandSession = field(default_factory=CommandSession)


# ---------------------------------------------------------------------------
# Action outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolActionReturn:
    """Schedule a tool call (shell dispatch uses run_shell_command)."""

    tool_name: str
    tool_args: dict[str, Any]
    type: Literal["tool"] = "tool"


@dataclass(frozen=True)
class MessageActionReturn:
    """Show a message to the user."""

    message_type: Literal["info", "error"]
    content: str
    type: Literal["message"] = "message"


@dataclass(frozen=True)
class OpenDialogActionReturn:
    """Open a dialog in the host UI."""

    dialog: Literal["help", "theme"]
    type: Literal["dialog"] = "dialog"


@dataclass(frozen=True)
class AiPromptActionReturn:
    """Hand raw content to the AI orchestrator as a prompt."""

    content: str
    type: Literal["ai-prompt"] = "ai-prompt"


SlashCommandActionReturn = Union[
    ToolActionReturn,
    MessageActionReturn,
    OpenDialogActionReturn,
    AiPromptActionReturn,
]

CommandAction = Callable[
    [CommandContext, str],
    Union[None, SlashCommandActionReturn, Awaitable[Union[None, SlashCommandActionReturn]]],
]
CommandCompletion = Callable[[CommandContext, str], Union[list[str], Awaitable[list[str]]]]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandMetadata(BaseDomainModel):
    """Provenance and descriptive data attached to a command."""

    scope: CommandScope = CommandScope.BUILTIN
    source_format: CommandSourceFormat | None = None
    source_path: Path | None = None
    category: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    author: str | None = None
    version: str | None = None
    can_execute_shell: bool = False

    def __post_init__(self) -> None:
        # Accept raw strings/lists from command files
        if not isinstance(self.scope, CommandScope):
            object.__setattr__(self, "scope", CommandScope(self.scope))
        if self.source_format is not None and not isinstance(self.source_format, CommandSourceFormat):
            object.__setattr__(self, "source_format", CommandSourceFormat(self.source_format))
        if self.source_path is not None and not isinstance(self.source_path, Path):
            object.__setattr__(self, "source_path", Path(self.source_path))
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags or ()))
        if self.can_execute_shell is None:
            object.__setattr__(self, "can_execute_shell", False)


@dataclass(frozen=True)
class SlashCommand:
    """
    The unit of invocation.

    A record with a non-empty sub_commands list is a parent: its action, if
    any, is never dispatched.
    """

    name: str
    alt_name: str | None = None
    description: str | None = None
    action: CommandAction | None = None
    completion: CommandCompletion | None = None
    sub_commands: tuple["SlashCommand", ...] = ()
    metadata: CommandMetadata | None = None

    @property
    def scope(self) -> CommandScope:
        return self.metadata.scope if self.metadata else CommandScope.BUILTIN

    @property
    def category(self) -> str | None:
        return self.metadata.category if self.metadata else None

    @property
    def keys(self) -> tuple[str, ...]:
        """Registry keys this command occupies."""
        return (self.name, self.alt_name) if self.alt_name else (self.name,)

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "altName": self.alt_name,
            "description": self.description,
            "hasAction": self.action is not None,
            "hasCompletion": self.completion is not None,
            "subCommands": [sub.to_json() for sub in self.sub_commands],
            "metadata": self.metadata.to_json() if self.metadata else None,
        }

    @classmethod
    def from_candidate(cls, candidate: Any) -> "SlashCommand":
        """
        Build a fresh record from an already validated candidate.

        Candidates are SlashCommand instances or mappings using camelCase or
        snake_case keys. Sub-commands are converted recursively.
        """
        if isinstance(candidate, SlashCommand):
            return candidate

        metadata = lookup(candidate, "metadata")
        if metadata is not None and not isinstance(metadata, CommandMetadata):
            metadata = CommandMetadata.from_json(metadata)

        return cls(
            name=lookup(candidate, "name"),
            alt_name=lookup(candidate, "alt_name") or None,
            description=lookup(candidate, "description"),
            action=lookup(candidate, "action"),
            completion=lookup(candidate, "completion"),
            sub_commands=tuple(
                cls.from_candidate(sub) for sub in (lookup(candidate, "sub_commands") or ())
            ),
            metadata=metadata,
        )


@dataclass(frozen=True)
class ScopeDirectoryConfig:
    """A directory commands may live in, and the scope it grants them."""

    path: Path
    scope: CommandScope
    enabled: bool = True


class ICommandLoader(ABC):
    """Interface for command loaders."""

    @abstractmethod
    async def load_commands(self) -> list[SlashCommand]:
        """
        Load commands from this loader's source.

        Returns:
            List of loaded commands, in override order
        """
        pass


# Template variable placeholder
SHORTHAND_ARGS_PLACEHOLDER = "{{args}}"

# Tool used for shell dispatch
SHELL_TOOL_NAME = "run_shell_command"
