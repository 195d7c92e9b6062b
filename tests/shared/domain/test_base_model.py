"""Tests for camelCase domain model serialization."""

from pathlib import Path

import pytest

from slashcmd.commands.types import CommandMetadata, CommandScope, CommandSourceFormat, SlashCommand
from slashcmd.shared.domain.base_model import has_key, lookup, to_camel_case


def test_case_conversion():
    assert to_camel_case("can_execute_shell") == "canExecuteShell"


def test_lookup_accepts_either_spelling():
    assert lookup({"altName": "x"}, "alt_name") == "x"
    assert lookup({"alt_name": "y", "altName": "x"}, "alt_name") == "y"
    assert lookup({}, "alt_name", "default") == "default"
    assert has_key({"subCommands": []}, "sub_commands")


def test_metadata_to_json_is_camel_case():
    metadata = CommandMetadata(
        scope=CommandScope.PERSONAL,
        source_format=CommandSourceFormat.JSON,
        source_path=Path("/tmp/x.json"),
        tags=frozenset({"b", "a"}),
        can_execute_shell=True,
    )

    data = metadata.to_json()

    assert data["scope"] == "personal"
    assert data["sourceFormat"] == "json"
    assert data["sourcePath"] == "/tmp/x.json"
    assert data["tags"] == ["a", "b"]
    assert data["canExecuteShell"] is True


def test_metadata_from_json_coerces_values():
    metadata = CommandMetadata.from_json(
        {"scope": "project", "sourceFormat": "markdown", "sourcePath": "a.md", "tags": ["x"], "canExecuteShell": None}
    )

    assert metadata.scope is CommandScope.PROJECT
    assert metadata.source_format is CommandSourceFormat.MARKDOWN
    assert metadata.source_path == Path("a.md")
    assert metadata.tags == frozenset({"x"})
    assert metadata.can_execute_shell is False


def test_metadata_rejects_unknown_scope():
    with pytest.raises(ValueError):
        CommandMetadata(scope="global")


def test_slash_command_to_json():
    command = SlashCommand(
        name="parent",
        alt_name="p",
        action=lambda context, args: None,
        sub_commands=(SlashCommand(name="child"),),
    )

    data = command.to_json()

    assert data["altName"] == "p"
    assert data["hasAction"] is True
    assert data["subCommands"][0]["name"] == "child"
    assert data["metadata"] is None
