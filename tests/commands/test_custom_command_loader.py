"""Tests for CustomCommandLoader."""

import pytest

from slashcmd.commands.custom_command_loader import CustomCommandLoader, default_scope_directories
from slashcmd.commands.types import CommandScope, CommandSourceFormat, ScopeDirectoryConfig


def test_default_directories_order(project_root, home_dir, test_settings):
    directories = default_scope_directories(project_root, home_dir, test_settings)

    assert [d.scope for d in directories] == [CommandScope.PROJECT, CommandScope.PERSONAL]
    assert directories[0].path == project_root / ".gemini" / "commands"
    assert directories[1].path == home_dir / ".gemini" / "commands"
    assert all(d.enabled for d in directories)


@pytest.mark.asyncio
async def test_missing_directories_load_nothing(loader):
    assert await loader.load_custom_commands_async() == []
    assert loader.get_all_commands() == []


@pytest.mark.asyncio
async def test_loads_every_supported_format(loader, project_commands_dir, write_json):
    write_json(project_commands_dir, "greet.json", {"name": "greet", "command": "echo hi"})
    (project_commands_dir / "lint.yaml").write_text("name: lint\ncommand: ruff check\n", encoding="utf-8")
    (project_commands_dir / "build.md").write_text("# Build\n```bash\nmake\n```\n", encoding="utf-8")
    (project_commands_dir / "hello.py").write_text('COMMAND = {"name": "hello"}\n', encoding="utf-8")
    (project_commands_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    (project_commands_dir / "nested").mkdir()
    write_json(project_commands_dir / "nested", "deep.json", {"name": "deep"})

    commands = await loader.load_custom_commands_async()

    formats = {c.name: c.metadata.source_format for c in commands}
    assert formats == {
        "greet": CommandSourceFormat.JSON,
        "lint": CommandSourceFormat.YAML,
        "build": CommandSourceFormat.MARKDOWN,
        "hello": CommandSourceFormat.MODULE,
    }


@pytest.mark.asyncio
async def test_metadata_stamp_overrides_file_values(loader, project_commands_dir):
    (project_commands_dir / "claims.py").write_text(
        'COMMAND = {"name": "claims", "metadata": {"scope": "builtin", "sourceFormat": "json", "category": "x"}}\n',
        encoding="utf-8",
    )

    [command] = await loader.load_custom_commands_async()

    assert command.metadata.scope == CommandScope.PROJECT
    assert command.metadata.source_format == CommandSourceFormat.MODULE
    assert command.metadata.source_path == project_commands_dir / "claims.py"
    assert command.metadata.category == "x"


@pytest.mark.asyncio
async def test_alias_is_registered(loader, project_commands_dir, write_json):
    write_json(project_commands_dir, "deploy.json", {"name": "deploy", "altName": "dep"})

    await loader.load_custom_commands_async()

    assert loader.get_command("deploy") is loader.get_command("dep")


@pytest.mark.asyncio
async def test_malformed_file_does_not_block_siblings_or_other_scope(
    loader, project_commands_dir, personal_commands_dir, write_json
):
    (project_commands_dir / "a-broken.json").write_text("{not json", encoding="utf-8")
    write_json(project_commands_dir, "b-good.json", {"name": "good"})
    (personal_commands_dir / "boom.py").write_text("raise ImportError('nope')\n", encoding="utf-8")
    write_json(personal_commands_dir, "mine.json", {"name": "mine"})

    commands = await loader.load_custom_commands_async()

    assert sorted(c.name for c in commands) == ["good", "mine"]


@pytest.mark.asyncio
async def test_invalid_module_command_is_rejected(loader, project_commands_dir):
    (project_commands_dir / "bad.py").write_text('COMMAND = {"name": "Bad Name", "action": 3}\n', encoding="utf-8")

    assert await loader.load_custom_commands_async() == []


@pytest.mark.asyncio
async def test_project_loads_before_personal(loader, project_commands_dir, personal_commands_dir, write_json):
    write_json(project_commands_dir, "same.json", {"name": "same", "description": "project"})
    write_json(personal_commands_dir, "same.json", {"name": "same", "description": "personal"})

    commands = await loader.load_custom_commands_async()

    assert [c.scope for c in commands] == [CommandScope.PROJECT, CommandScope.PERSONAL]
    assert loader.get_command("same").description == "personal"


@pytest.mark.asyncio
async def test_disabled_directory_is_skipped(tmp_path, test_settings, write_json):
    enabled = tmp_path / "enabled"
    disabled = tmp_path / "disabled"
    enabled.mkdir()
    disabled.mkdir()
    write_json(enabled, "one.json", {"name": "one"})
    write_json(disabled, "two.json", {"name": "two"})

    loader = CustomCommandLoader(
        project_root=tmp_path,
        settings=test_settings,
        directories=[
            ScopeDirectoryConfig(enabled, CommandScope.PROJECT),
            ScopeDirectoryConfig(disabled, CommandScope.PERSONAL, enabled=False),
        ],
    )

    assert [c.name for c in await loader.load_custom_commands_async()] == ["one"]


@pytest.mark.asyncio
async def test_scope_and_category_queries(loader, project_commands_dir, personal_commands_dir, write_json):
    write_json(project_commands_dir, "p.json", {"name": "p", "category": "ops"})
    write_json(personal_commands_dir, "q.json", {"name": "q", "category": "dev"})

    await loader.load_custom_commands_async()

    assert [c.name for c in loader.get_commands_by_scope("personal")] == ["q"]
    assert [c.name for c in loader.get_commands_by_category("ops")] == ["p"]


@pytest.mark.asyncio
async def test_dispose_clears_state(loader, project_commands_dir, write_json):
    write_json(project_commands_dir, "p.json", {"name": "p"})
    await loader.load_custom_commands_async()
    await loader.start_watching_async()

    loader.dispose()

    assert loader.get_all_commands() == []
    assert not loader.is_watching


@pytest.mark.asyncio
async def test_load_finishing_after_dispose_is_discarded(loader, project_commands_dir, write_json):
    write_json(project_commands_dir, "p.json", {"name": "p"})
    original_load_directory = loader._load_directory_async

    async def _dispose_mid_load(dir_config, command_map):
        loaded = await original_load_directory(dir_config, command_map)
        loader.dispose()
        return loaded

    loader._load_directory_async = _dispose_mid_load
    loaded = await loader.load_custom_commands_async()

    assert [c.name for c in loaded] == ["p"]
    assert loader.get_all_commands() == []
    assert loader.get_command("p") is None
