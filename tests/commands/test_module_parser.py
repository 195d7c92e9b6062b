"""Tests for the Python module command parser."""

import sys
import textwrap

import pytest

from slashcmd.commands.parsers.module_parser import ModuleCommandParser
from slashcmd.commands.types import MessageActionReturn, SlashCommand


def _write_module(directory, filename, source):
    path = directory / filename
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_primary_export_slash_command(tmp_path, command_context):
    path = _write_module(
        tmp_path,
        "hello.py",
        """
        from slashcmd.commands.types import MessageActionReturn, SlashCommand

        def _greet(context, args):
            return MessageActionReturn(message_type="info", content=f"hello {args}")

        COMMAND = SlashCommand(name="hello", description="Say hello", action=_greet)
        """,
    )

    candidate = await ModuleCommandParser().parse(path)

    assert isinstance(candidate, SlashCommand)
    assert candidate.name == "hello"
    outcome = candidate.action(command_context, "there")
    assert isinstance(outcome, MessageActionReturn)
    assert outcome.content == "hello there"


@pytest.mark.asyncio
async def test_fallback_export_mapping(tmp_path):
    path = _write_module(
        tmp_path,
        "mapping.py",
        """
        command = {"name": "mapped", "altName": "m", "description": "From a dict"}
        """,
    )

    candidate = await ModuleCommandParser().parse(path)

    assert candidate == {"name": "mapped", "altName": "m", "description": "From a dict"}


@pytest.mark.asyncio
async def test_missing_export_returns_none(tmp_path):
    path = _write_module(tmp_path, "empty.py", "VALUE = 1\n")

    assert await ModuleCommandParser().parse(path) is None


@pytest.mark.asyncio
async def test_non_object_export_returns_none(tmp_path):
    path = _write_module(tmp_path, "string.py", 'COMMAND = "not a command"\n')

    assert await ModuleCommandParser().parse(path) is None


@pytest.mark.asyncio
async def test_import_error_returns_none(tmp_path):
    path = _write_module(tmp_path, "boom.py", "raise RuntimeError('boom at import')\n")

    assert await ModuleCommandParser().parse(path) is None


@pytest.mark.asyncio
async def test_syntax_error_returns_none(tmp_path):
    path = _write_module(tmp_path, "syntax.py", "def broken(:\n")

    assert await ModuleCommandParser().parse(path) is None


@pytest.mark.asyncio
async def test_reload_sees_fresh_content(tmp_path):
    path = _write_module(tmp_path, "fresh.py", 'COMMAND = {"name": "fresh", "description": "v1"}\n')
    parser = ModuleCommandParser()

    first = await parser.parse(path)
    path.write_text('COMMAND = {"name": "fresh", "description": "v2"}\n', encoding="utf-8")
    second = await parser.parse(path)

    assert first["description"] == "v1"
    assert second["description"] == "v2"


@pytest.mark.asyncio
async def test_module_is_not_left_in_sys_modules(tmp_path):
    path = _write_module(tmp_path, "transient.py", 'COMMAND = {"name": "transient"}\n')
    before = set(sys.modules)

    await ModuleCommandParser().parse(path)

    leaked = [name for name in set(sys.modules) - before if "transient" in name]
    assert leaked == []
