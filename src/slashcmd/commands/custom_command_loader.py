"""
Custom command loading from the project and personal scope directories.

Directories are walked in declared order (project, then personal). Each
file is routed to a parser by extension, validated, and stamped with its
provenance. One broken file never stops the others from loading.
"""

import dataclasses
from collections.abc import Mapping
from pathlib import Path

from slashcmd.commands.file_io import is_directory_async, list_files_async
from slashcmd.commands.parsers import default_parsers, get_source_format
from slashcmd.commands.parsers.base import CommandFileParser
from slashcmd.commands.types import (
    CommandMetadata,
    CommandScope,
    CommandSourceFormat,
    ICommandLoader,
    ScopeDirectoryConfig,
    SlashCommand,
)
from slashcmd.commands.validator import CommandValidator
from slashcmd.commands.watcher import CommandWatcher, ReloadCallback
from slashcmd.shared.domain.exceptions import CommandValidationError
from slashcmd.shared.infrastructure.config import Settings, get_settings
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


def get_project_commands_dir(project_root: Path, settings: Settings | None = None) -> Path:
    """Project-scope commands directory (<root>/.gemini/commands)."""
    settings = settings or get_settings()
    return project_root / settings.commands_dir


def get_personal_commands_dir(home_dir: Path | None = None, settings: Settings | None = None) -> Path:
    """Personal-scope commands directory (~/.gemini/commands)."""
    settings = settings or get_settings()
    return (home_dir or Path.home()) / settings.commands_dir


def default_scope_directories(
    project_root: Path,
    home_dir: Path | None = None,
    settings: Settings | None = None,
) -> list[ScopeDirectoryConfig]:
    """Scope directories in load order: project first, personal last."""
    return [
        ScopeDirectoryConfig(get_project_commands_dir(project_root, settings), CommandScope.PROJECT),
        ScopeDirectoryConfig(get_personal_commands_dir(home_dir, settings), CommandScope.PERSONAL),
    ]


class CustomCommandLoader(ICommandLoader):
    """Loads user-authored commands from scope directories."""

    def __init__(
        self,
        project_root: Path | None = None,
        home_dir: Path | None = None,
        settings: Settings | None = None,
        directories: list[ScopeDirectoryConfig] | None = None,
        parsers: dict[CommandSourceFormat, CommandFileParser] | None = None,
        validator: CommandValidator | None = None,
    ):
        """
        Initialize the loader.

        Args:
            project_root: Project root (defaults to the current directory)
            home_dir: User home used for the personal scope (defaults to Path.home())
            settings: Settings instance (defaults to the global settings)
            directories: Explicit scope directories, overriding the defaults
            parsers: Parser per source format (defaults to all built-in parsers)
            validator: Command validator
        """
        self.settings = settings or get_settings()
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._directories = tuple(
            directories
            if directories is not None
            else default_scope_directories(self.project_root, home_dir, self.settings)
        )
        self.parsers = parsers or default_parsers()
        self.validator = validator or CommandValidator()

        self._commands: dict[str, SlashCommand] = {}
        self._watcher: CommandWatcher | None = None
        self._disposed = False

    @property
    def directories(self) -> tuple[ScopeDirectoryConfig, ...]:
        return self._directories

    @property
    def is_watching(self) -> bool:
        return self._watcher is not None and self._watcher.is_watching

    async def load_commands(self) -> list[SlashCommand]:
        return await self.load_custom_commands_async()

    async def load_custom_commands_async(self) -> list[SlashCommand]:
        """
        Load every custom command from the enabled scope directories.

        The loader's own name map is rebuilt locally and replaced in one
        step when the walk completes.

        Returns:
            Loaded commands in load order (project scope before personal)
        """
        loaded: list[SlashCommand] = []
        command_map: dict[str, SlashCommand] = {}

        for dir_config in self._directories:
            if not dir_config.enabled:
                continue
            try:
                loaded.extend(await self._load_directory_async(dir_config, command_map))
            except Exception as e:
                logger.warning(
                    "command_directory_load_failed",
                    directory=str(dir_config.path),
                    scope=dir_config.scope.value,
                    error=str(e),
                )

        if self._disposed:
            logger.debug("custom_commands_discarded", count=len(loaded))
            return loaded
        self._commands = command_map
        logger.debug("custom_commands_loaded", count=len(loaded))
        return loaded

    async def _load_directory_async(
        self,
        dir_config: ScopeDirectoryConfig,
        command_map: dict[str, SlashCommand],
    ) -> list[SlashCommand]:
        if not await is_directory_async(dir_config.path):
            logger.debug("command_directory_missing", directory=str(dir_config.path))
            return []

        commands: list[SlashCommand] = []
        for file_path in await list_files_async(dir_config.path):
            command = await self.load_command_file_async(file_path, dir_config.scope)
            if command is None:
                continue
            commands.append(command)
            for key in command.keys:
                command_map[key] = command
        return commands

    async def load_command_file_async(self, file_path: Path, scope: CommandScope) -> SlashCommand | None:
        """
        Parse, validate and stamp one command file.

        Returns:
            The command, or None if the file is unsupported or broken
        """
        source_format = get_source_format(file_path)
        if source_format is None:
            logger.debug("command_file_skipped", file=str(file_path), reason="unsupported_extension")
            return None

        parser = self.parsers.get(source_format)
        if parser is None:
            logger.debug("command_file_skipped", file=str(file_path), reason="no_parser")
            return None

        try:
            candidate = await parser.parse(file_path, self.project_root)
            if candidate is None:
                return None

            result = self.validator.validate(candidate)
            if not result.is_valid:
                raise CommandValidationError(
                    f"Command validation failed for {file_path.name}",
                    result.errors,
                    {"name": _candidate_name(candidate)},
                )

            command = self._stamp(result.command, scope, source_format, file_path)

        except CommandValidationError as e:
            logger.error(
                "command_validation_failed",
                file=str(file_path),
                name=e.context.get("name", "unknown"),
                errors=e.errors,
            )
            return None
        except Exception as e:
            logger.error(
                "command_load_failed",
                file=str(file_path),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        logger.debug(
            "command_loaded",
            name=command.name,
            scope=scope.value,
            source_format=source_format.value,
            file=str(file_path),
        )
        return command

    def _stamp(
        self,
        command: SlashCommand,
        scope: CommandScope,
        source_format: CommandSourceFormat,
        file_path: Path,
    ) -> SlashCommand:
        """Attach provenance; the loader's values win over whatever the file declared."""
        metadata = command.metadata or CommandMetadata()
        metadata = dataclasses.replace(
            metadata,
            scope=scope,
            source_format=source_format,
            source_path=file_path,
        )
        return dataclasses.replace(command, metadata=metadata)

    # ------------------------------------------------------------------
    # Queries over the last load
    # ------------------------------------------------------------------

    def get_command(self, name: str) -> SlashCommand | None:
        return self._commands.get(name)

    def get_all_commands(self) -> list[SlashCommand]:
        """Every map entry (a command with an alias appears twice)."""
        return list(self._commands.values())

    def get_commands_by_scope(self, scope: CommandScope | str) -> list[SlashCommand]:
        scope = CommandScope(scope)
        return [command for command in self.get_all_commands() if command.scope == scope]

    def get_commands_by_category(self, category: str) -> list[SlashCommand]:
        return [command for command in self.get_all_commands() if command.category == category]

    # ------------------------------------------------------------------
    # Hot reload
    # ------------------------------------------------------------------

    async def start_watching_async(self, reload_callback: ReloadCallback | None = None) -> None:
        """
        Watch the enabled scope directories and reload on change.

        Args:
            reload_callback: Coroutine function run after each debounced
                change (defaults to reloading this loader)
        """
        if self.is_watching:
            return

        self._watcher = CommandWatcher(
            [d.path for d in self._directories if d.enabled],
            reload_callback or self._reload_async,
            debounce_seconds=self.settings.reload_debounce_seconds,
            poll_interval=self.settings.watch_poll_interval,
        )
        await self._watcher.start_async()
        logger.debug(
            "command_watch_started",
            directories=[str(d) for d in self._watcher.directory_watcher.watched_directories],
        )

    async def _reload_async(self) -> None:
        commands = await self.load_custom_commands_async()
        logger.debug("custom_commands_reloaded", count=len(commands))

    @property
    def watcher(self) -> CommandWatcher | None:
        return self._watcher

    def stop_watching(self) -> None:
        """Close all directory watches and cancel a pending reload."""
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    def dispose(self) -> None:
        """Stop watching and drop loaded commands; later loads leave the map empty."""
        self._disposed = True
        self.stop_watching()
        self._commands = {}


def _candidate_name(candidate: object) -> str:
    name = candidate.get("name") if isinstance(candidate, Mapping) else getattr(candidate, "name", None)
    return name if isinstance(name, str) and name else "unknown"
