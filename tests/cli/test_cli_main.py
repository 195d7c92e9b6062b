"""Tests for the slashcmd CLI."""

import json

import pytest
from typer.testing import CliRunner

from slashcmd import __version__
from slashcmd.cli import main as cli_main
from slashcmd.cli.main import app
from slashcmd.shared.infrastructure.config import Settings


@pytest.fixture
def cli_runner():
    """Fixture providing Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def isolated_home(monkeypatch, home_dir):
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def project_with_commands(project_commands_dir, project_root, isolated_home):
    (project_commands_dir / "greet.json").write_text(
        json.dumps({"name": "greet", "category": "demo", "command": "echo hi", "args": "{{args}}"}),
        encoding="utf-8",
    )
    (project_commands_dir / "review.md").write_text("# Review\n\nCheck the diff.\n", encoding="utf-8")
    return project_root


def test_list_shows_builtin_and_project_commands(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["list", "--project", str(project_with_commands)])

    assert result.exit_code == 0
    for name in ("/greet", "/review", "/help", "/memory"):
        assert name in result.output


def test_list_filters_by_scope(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["list", "--scope", "project", "--project", str(project_with_commands)])

    assert result.exit_code == 0
    assert "/greet" in result.output
    assert "/help" not in result.output


def test_list_filters_by_category(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["list", "--category", "markdown", "--project", str(project_with_commands)])

    assert result.exit_code == 0
    assert "/review" in result.output
    assert "/greet" not in result.output


def test_show_command(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["show", "greet", "--project", str(project_with_commands)])

    assert result.exit_code == 0
    assert "project" in result.output
    assert "json" in result.output


def test_show_unknown_command(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["show", "nope", "--project", str(project_with_commands)])

    assert result.exit_code == 1
    assert "Unknown command" in result.output


def test_run_prints_shell_request(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["run", "greet", "world", "--project", str(project_with_commands)])

    assert result.exit_code == 0
    assert "run_shell_command" in result.output
    assert "echo hi world" in result.output


def test_run_sub_command(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["run", "memory", "add", "tabs", "--project", str(project_with_commands)])

    assert result.exit_code == 0
    assert "save_memory" in result.output
    assert "tabs" in result.output


def test_run_unknown_command(cli_runner, project_with_commands):
    result = cli_runner.invoke(app, ["run", "missing", "--project", str(project_with_commands)])

    assert result.exit_code == 1


def test_invalid_project_root(cli_runner, tmp_path, isolated_home):
    result = cli_runner.invoke(app, ["list", "--project", str(tmp_path / "does-not-exist")])

    assert result.exit_code == 1
    assert "not a directory" in result.output


def test_watch_refused_when_hot_reload_disabled(cli_runner, monkeypatch, project_root, isolated_home):
    monkeypatch.setattr(cli_main, "get_settings", lambda: Settings(app_env="production", _env_file=None))

    result = cli_runner.invoke(app, ["watch", "--project", str(project_root)])

    assert result.exit_code == 1
    assert "disabled" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
