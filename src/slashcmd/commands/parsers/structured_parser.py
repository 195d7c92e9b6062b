"""
Structured-data command parsers (JSON and YAML).

Both formats share one simple schema::

    {name, altName?, description?, category?, tags?, author?, version?,
     command?, args?, cwd?}

When ``command`` is present the record gets a generated shell action.
"""

import json
import os
from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from slashcmd.commands.file_io import read_text_async
from slashcmd.commands.parsers.base import CommandFileParser
from slashcmd.commands.types import (
    SHELL_TOOL_NAME,
    SHORTHAND_ARGS_PLACEHOLDER,
    CommandContext,
    CommandSourceFormat,
    ToolActionReturn,
)
from slashcmd.commands.validator import CommandValidator
from slashcmd.shared.domain.base_model import lookup
from slashcmd.shared.domain.exceptions import CommandSyntaxError
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Fields copied verbatim from the file into the candidate record
_RECORD_FIELDS = ("name", "alt_name", "description")

# Fields that become metadata
_METADATA_FIELDS = ("category", "tags", "author", "version")


def compose_shell_command(command: str, args: str | None, user_args: str) -> str:
    """
    Build the shell string for a templated command.

    Examples:
        >>> compose_shell_command("echo hi", "{{args}}", "world")
        'echo hi world'
        >>> compose_shell_command("ls", None, "ignored")
        'ls'
    """
    substituted = (args or "").replace(SHORTHAND_ARGS_PLACEHOLDER, user_args)
    return f"{command} {substituted}".strip()


def make_shell_action(command: str, args: str | None, cwd: str | None, project_root: Path | None):
    """Create an action that requests execution of the composed shell string."""

    def action(context: CommandContext, user_args: str) -> ToolActionReturn:
        root = context.services.project_root or project_root
        working_dir = cwd or (str(root) if root else None) or os.getcwd()
        return ToolActionReturn(
            tool_name=SHELL_TOOL_NAME,
            tool_args={
                "command": compose_shell_command(command, args, user_args or ""),
                "cwd": working_dir,
            },
        )

    return action


class StructuredCommandParser(CommandFileParser):
    """Shared JSON/YAML handling: decode, check schema, build candidate."""

    def __init__(self, validator: CommandValidator | None = None):
        self.validator = validator or CommandValidator()

    @abstractmethod
    def decode(self, text: str) -> Any:
        """Deserialize file text, raising CommandSyntaxError on malformed input."""
        pass

    async def parse(self, path: Path, project_root: Path | None = None) -> Any | None:
        try:
            text = await read_text_async(path)
            data = self.decode(text)
        except CommandSyntaxError as e:
            logger.error(
                "command_file_syntax_error",
                file=str(path),
                format=self.source_format.value,
                error=str(e),
            )
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error("command_file_read_failed", file=str(path), error=str(e))
            return None

        if not isinstance(data, Mapping):
            logger.error(
                "command_validation_failed",
                file=str(path),
                name="unknown",
                errors=[f"Command file must contain an object, got {type(data).__name__}"],
            )
            return None

        errors = self.validator.collect_errors(data)
        if errors:
            name = data.get("name")
            logger.error(
                "command_validation_failed",
                file=str(path),
                name=name if isinstance(name, str) and name else "unknown",
                errors=errors,
            )
            return None

        return self._build_candidate(data, project_root)

    def _build_candidate(self, data: Mapping[str, Any], project_root: Path | None) -> dict[str, Any]:
        candidate: dict[str, Any] = {}
        for field_name in _RECORD_FIELDS:
            value = lookup(data, field_name)
            if value is not None:
                candidate[field_name] = value

        metadata: dict[str, Any] = {}
        for field_name in _METADATA_FIELDS:
            value = lookup(data, field_name)
            if value is not None:
                metadata[field_name] = value

        command = data.get("command")
        metadata["can_execute_shell"] = bool(command)
        if command:
            candidate["action"] = make_shell_action(command, data.get("args"), data.get("cwd"), project_root)

        candidate["metadata"] = metadata
        return candidate


class JsonCommandParser(StructuredCommandParser):
    """Parses ``.json`` command files."""

    source_format = CommandSourceFormat.JSON

    def decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CommandSyntaxError(f"Invalid JSON: {e}") from e


class YamlCommandParser(StructuredCommandParser):
    """Parses ``.yaml`` / ``.yml`` command files."""

    source_format = CommandSourceFormat.YAML

    def decode(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CommandSyntaxError(f"Invalid YAML: {e}") from e
