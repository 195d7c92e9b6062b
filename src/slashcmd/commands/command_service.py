"""Command service: assembles the registry and keeps it live."""

from pathlib import Path

from slashcmd.commands.builtin_commands import BuiltinCommandLoader
from slashcmd.commands.custom_command_loader import CustomCommandLoader
from slashcmd.commands.registry import CommandRegistry
from slashcmd.commands.types import CommandScope, ICommandLoader, SlashCommand
from slashcmd.shared.infrastructure.config import Settings, get_settings
from slashcmd.shared.infrastructure.error_handler import async_error_handler
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CommandService:
    """
    Orchestrates built-in and custom command loading.

    Override law: personal overrides project overrides built-in, for names
    and aliases alike. The registry is rebuilt from scratch on every load
    and replaced in a single assignment.
    """

    def __init__(
        self,
        builtin_loader: ICommandLoader | None = None,
        custom_loader: CustomCommandLoader | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the service.

        Args:
            builtin_loader: Loader for built-in commands
            custom_loader: Loader for project/personal commands (None disables custom commands)
            settings: Settings instance (defaults to the global settings)
        """
        self.builtin_loader = builtin_loader or BuiltinCommandLoader()
        self.custom_loader = custom_loader
        self.settings = settings or get_settings()
        self._registry = CommandRegistry()

    @classmethod
    def create_default(
        cls,
        project_root: Path,
        home_dir: Path | None = None,
        settings: Settings | None = None,
    ) -> "CommandService":
        """Service with built-in commands plus both custom scopes."""
        settings = settings or get_settings()
        return cls(
            BuiltinCommandLoader(),
            CustomCommandLoader(project_root=project_root, home_dir=home_dir, settings=settings),
            settings,
        )

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    async def _build_registry_async(self, tolerate_failures: bool) -> CommandRegistry:
        """
        Fetch every layer and fold them into a new registry.

        With tolerate_failures a failing loader is logged and contributes
        nothing; otherwise its exception propagates and no registry is built.
        """
        builtin_commands: list[SlashCommand] = []
        try:
            builtin_commands = await self.builtin_loader.load_commands()
        except Exception as e:
            if not tolerate_failures:
                raise
            logger.error("builtin_commands_load_failed", error=str(e))

        custom_commands: list[SlashCommand] = []
        if self.custom_loader is not None:
            try:
                custom_commands = await self.custom_loader.load_custom_commands_async()
                logger.debug("custom_command_layer_loaded", count=len(custom_commands))
            except Exception as e:
                if not tolerate_failures:
                    raise
                logger.error("custom_commands_load_failed", error=str(e))

        # Custom commands arrive project-first, so personal ones land last
        return CommandRegistry.build([builtin_commands, custom_commands])

    async def load_commands_async(self) -> CommandRegistry:
        """
        Initial load: build all layers and swap in the new registry.

        A failing loader is logged and contributes nothing; the remaining
        layers still load.
        """
        registry = await self._build_registry_async(tolerate_failures=True)
        self._registry = registry
        return registry

    @async_error_handler(reraise=False, event="command_reload_failed")
    async def reload_commands_async(self) -> CommandRegistry:
        """Full reload; if any layer fails the previous registry stays authoritative."""
        registry = await self._build_registry_async(tolerate_failures=False)
        self._registry = registry
        logger.debug("custom_commands_reloaded", commands=len(registry.commands()))
        return registry

    def get_commands(self) -> list[SlashCommand]:
        return self._registry.commands()

    def get_command(self, name: str) -> SlashCommand | None:
        return self._registry.get(name)

    def get_commands_by_scope(self, scope: CommandScope | str) -> list[SlashCommand]:
        return self._registry.by_scope(scope)

    def get_commands_by_category(self, category: str) -> list[SlashCommand]:
        return self._registry.by_category(category)

    def find_commands(self, prefix: str) -> list[SlashCommand]:
        """
        Find commands whose name or alias starts with a prefix.

        Args:
            prefix: Command name prefix (without /)

        Returns:
            Matching commands, sorted by name
        """
        prefix_lower = prefix.lower()
        matches = [
            command
            for command in self._registry.commands()
            if any(key.lower().startswith(prefix_lower) for key in command.keys)
        ]
        return sorted(matches, key=lambda command: command.name)

    async def start_watching_async(self) -> None:
        """Hot reload: rebuild the whole registry after changes settle."""
        if self.custom_loader is not None:
            await self.custom_loader.start_watching_async(self.reload_commands_async)

    def stop_watching(self) -> None:
        if self.custom_loader is not None:
            self.custom_loader.stop_watching()

    @property
    def is_watching(self) -> bool:
        return self.custom_loader is not None and self.custom_loader.is_watching

    def dispose(self) -> None:
        """Stop watching and release loader state."""
        self.stop_watching()
        if self.custom_loader is not None:
            self.custom_loader.dispose()
