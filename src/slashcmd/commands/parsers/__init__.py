"""Command definition parsers, one per source format."""

from pathlib import Path

from slashcmd.commands.parsers.base import CommandFileParser
from slashcmd.commands.parsers.markdown_parser import MarkdownCommandParser
from slashcmd.commands.parsers.module_parser import ModuleCommandParser
from slashcmd.commands.parsers.structured_parser import JsonCommandParser, YamlCommandParser
from slashcmd.commands.types import CommandSourceFormat

EXTENSION_FORMATS: dict[str, CommandSourceFormat] = {
    ".py": CommandSourceFormat.MODULE,
    ".json": CommandSourceFormat.JSON,
    ".yaml": CommandSourceFormat.YAML,
    ".yml": CommandSourceFormat.YAML,
    ".md": CommandSourceFormat.MARKDOWN,
    ".markdown": CommandSourceFormat.MARKDOWN,
}


def get_source_format(path: Path) -> CommandSourceFormat | None:
    """Source format for a file, or None if the extension is not recognized."""
    return EXTENSION_FORMATS.get(path.suffix.lower())


def default_parsers() -> dict[CommandSourceFormat, CommandFileParser]:
    return {
        CommandSourceFormat.MODULE: ModuleCommandParser(),
        CommandSourceFormat.JSON: JsonCommandParser(),
        CommandSourceFormat.YAML: YamlCommandParser(),
        CommandSourceFormat.MARKDOWN: MarkdownCommandParser(),
    }


__all__ = [
    "CommandFileParser",
    "EXTENSION_FORMATS",
    "JsonCommandParser",
    "MarkdownCommandParser",
    "ModuleCommandParser",
    "YamlCommandParser",
    "default_parsers",
    "get_source_format",
]
