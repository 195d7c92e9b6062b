"""Shared test fixtures for the slashcmd test suite."""

import json
from pathlib import Path

import pytest

from slashcmd.commands.custom_command_loader import CustomCommandLoader
from slashcmd.commands.types import CommandContext, CommandServices
from slashcmd.shared.infrastructure.config import Settings


@pytest.fixture
def project_root(tmp_path):
    """Create a temporary project root directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def home_dir(tmp_path):
    """Create a temporary user home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def project_commands_dir(project_root):
    directory = project_root / ".gemini" / "commands"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def personal_commands_dir(home_dir):
    directory = home_dir / ".gemini" / "commands"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def test_settings():
    """Fast timings so watcher tests finish quickly."""
    return Settings(
        app_env="development",
        hot_reload=True,
        reload_debounce_ms=50,
        watch_poll_interval=0.02,
        _env_file=None,
    )


@pytest.fixture
def loader(project_root, home_dir, test_settings):
    """Custom command loader bound to the temporary scope directories."""
    return CustomCommandLoader(project_root=project_root, home_dir=home_dir, settings=test_settings)


@pytest.fixture
def command_context(project_root):
    return CommandContext(services=CommandServices(project_root=project_root))


@pytest.fixture
def write_json():
    """Write a JSON command file and return its path."""

    def _write(directory: Path, filename: str, data) -> Path:
        path = directory / filename
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
