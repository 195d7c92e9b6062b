"""
Command contract validation.

Every candidate, whatever file format it came from, passes through
CommandValidator before it becomes callable. Defects are collected
exhaustively so one report shows every problem in a file.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from slashcmd.commands.naming import NAME_RULE, is_valid_command_name
from slashcmd.commands.types import CommandMetadata, CommandScope, CommandSourceFormat, SlashCommand
from slashcmd.shared.domain.base_model import to_camel_case
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

_MISSING = object()

# Optional top-level fields that must be strings when present
_STRING_FIELDS = ("description", "category", "author", "version", "command", "args", "cwd")

# Optional metadata fields that must be strings when present
_METADATA_STRING_FIELDS = ("category", "author", "version")


@dataclass
class CommandValidationResult:
    """Outcome of validating one candidate."""

    command: SlashCommand | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _get(candidate: Any, field_name: str) -> Any:
    """Read a field from a mapping (either key spelling) or an object attribute."""
    if isinstance(candidate, Mapping):
        if field_name in candidate:
            return candidate[field_name]
        return candidate.get(to_camel_case(field_name), _MISSING)
    return getattr(candidate, field_name, _MISSING)


def _present(value: Any) -> bool:
    return value is not _MISSING and value is not None


def _is_enum_value(value: Any, enum_type: type[Enum]) -> bool:
    if isinstance(value, enum_type):
        return True
    return isinstance(value, str) and value in {member.value for member in enum_type}


def _display_name(candidate: Any) -> str:
    name = _get(candidate, "name")
    return name if isinstance(name, str) and name else "unknown"


class CommandValidator:
    """Validates candidate command records against the command contract."""

    def validate(self, candidate: Any) -> CommandValidationResult:
        """
        Validate a candidate and build a fresh record from it.

        Args:
            candidate: SlashCommand instance or mapping with the record shape

        Returns:
            CommandValidationResult holding either the record or the defects
        """
        result = CommandValidationResult()

        if not isinstance(candidate, (Mapping, SlashCommand)):
            result.errors.append(
                f"Command definition must be an object, got {type(candidate).__name__}"
            )
            return result

        result.errors.extend(self.collect_errors(candidate))
        result.warnings.extend(self._collect_warnings(candidate))

        for warning in result.warnings:
            logger.warning("command_structure_warning", command=_display_name(candidate), warning=warning)

        if result.errors:
            return result

        try:
            result.command = SlashCommand.from_candidate(candidate)
        except (TypeError, ValueError) as e:
            result.errors.append(f"Command could not be built: {e}")
        return result

    def collect_errors(self, candidate: Any) -> list[str]:
        """Return every contract defect found in the candidate (empty if valid)."""
        errors: list[str] = []

        name = _get(candidate, "name")
        if not _present(name):
            errors.append(f'Command missing required "name" property (name {NAME_RULE})')
        elif not isinstance(name, str):
            errors.append('Command "name" must be a string')
        elif not is_valid_command_name(name):
            errors.append(f"Command name {NAME_RULE}")

        alt_name = _get(candidate, "alt_name")
        if _present(alt_name):
            if not isinstance(alt_name, str):
                errors.append('Command "altName" must be a string')
            elif not is_valid_command_name(alt_name):
                errors.append(f"Command altName {NAME_RULE}")

        for field_name in _STRING_FIELDS:
            value = _get(candidate, field_name)
            if _present(value) and not isinstance(value, str):
                errors.append(f'Command "{field_name}" must be a string')

        tags = _get(candidate, "tags")
        if _present(tags):
            errors.extend(self._tag_errors(tags, "Command"))

        for field_name in ("action", "completion"):
            value = _get(candidate, field_name)
            if _present(value) and not callable(value):
                errors.append(f'Command "{field_name}" must be a function')

        sub_commands = _get(candidate, "sub_commands")
        if _present(sub_commands):
            if not isinstance(sub_commands, (list, tuple)):
                errors.append('Command "subCommands" must be an array')
            else:
                for index, sub_command in enumerate(sub_commands):
                    if not isinstance(sub_command, (Mapping, SlashCommand)) or self.collect_errors(sub_command):
                        errors.append(f"Invalid sub-command at index {index}")

        metadata = _get(candidate, "metadata")
        if _present(metadata):
            errors.extend(self._metadata_errors(metadata))

        return errors

    def _tag_errors(self, tags: Any, owner: str) -> list[str]:
        if isinstance(tags, (str, bytes)) or not isinstance(tags, (list, tuple, set, frozenset)):
            return [f'{owner} "tags" must be an array']
        if any(not isinstance(tag, str) for tag in tags):
            return ["All tags must be strings"]
        return []

    def _metadata_errors(self, metadata: Any) -> list[str]:
        if isinstance(metadata, CommandMetadata):
            # Typed metadata: only the fields a caller could have mistyped
            metadata = {
                "category": metadata.category,
                "tags": list(metadata.tags),
                "author": metadata.author,
                "version": metadata.version,
                "can_execute_shell": metadata.can_execute_shell,
            }
        elif not isinstance(metadata, Mapping):
            return ['Command "metadata" must be an object']

        errors: list[str] = []

        for field_name in _METADATA_STRING_FIELDS:
            value = _get(metadata, field_name)
            if _present(value) and not isinstance(value, str):
                errors.append(f'Metadata "{field_name}" must be a string')

        tags = _get(metadata, "tags")
        if _present(tags):
            errors.extend(self._tag_errors(tags, "Metadata"))

        can_execute_shell = _get(metadata, "can_execute_shell")
        if _present(can_execute_shell) and not isinstance(can_execute_shell, bool):
            errors.append('Metadata "canExecuteShell" must be a boolean')

        scope = _get(metadata, "scope")
        if _present(scope) and not _is_enum_value(scope, CommandScope):
            errors.append(f'Metadata "scope" must be one of {sorted(s.value for s in CommandScope)}')

        source_format = _get(metadata, "source_format")
        if _present(source_format) and not _is_enum_value(source_format, CommandSourceFormat):
            errors.append(
                f'Metadata "sourceFormat" must be one of {sorted(f.value for f in CommandSourceFormat)}'
            )

        return errors

    def _collect_warnings(self, candidate: Any) -> list[str]:
        action = _get(candidate, "action")
        sub_commands = _get(candidate, "sub_commands")
        if _present(action) and isinstance(sub_commands, (list, tuple)) and len(sub_commands) > 0:
            return [
                "Command has both action and subCommands. "
                "Action will be ignored when subCommands are present."
            ]
        return []
