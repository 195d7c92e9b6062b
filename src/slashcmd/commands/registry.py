"""Name to command mapping with scope override resolution."""

from collections.abc import Iterable, Iterator

from slashcmd.commands.types import CommandScope, SlashCommand
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CommandRegistry:
    """
    Immutable snapshot of the command namespace.

    Keys are primary names and aliases. A later insertion under an existing
    key replaces the earlier one; there is no conflict error.
    """

    def __init__(self, entries: dict[str, SlashCommand] | None = None):
        self._entries: dict[str, SlashCommand] = dict(entries or {})

    @classmethod
    def build(cls, layers: Iterable[Iterable[SlashCommand]]) -> "CommandRegistry":
        """
        Fold ordered layers of commands into a registry.

        Layers are applied in order (built-in, project, personal), so the
        last layer wins for every key, name and alias alike.
        """
        entries: dict[str, SlashCommand] = {}
        for layer in layers:
            for command in layer:
                for key in command.keys:
                    previous = entries.get(key)
                    if previous is not None and previous is not command and previous.scope != command.scope:
                        logger.info(
                            "command_overridden",
                            key=key,
                            previous_scope=previous.scope.value,
                            scope=command.scope.value,
                        )
                    entries[key] = command
        return cls(entries)

    def get(self, name: str) -> SlashCommand | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        """All registered keys, names and aliases."""
        return list(self._entries)

    def commands(self) -> list[SlashCommand]:
        """Unique records still reachable through at least one key."""
        seen: set[int] = set()
        unique: list[SlashCommand] = []
        for command in self._entries.values():
            if id(command) not in seen:
                seen.add(id(command))
                unique.append(command)
        return unique

    def by_scope(self, scope: CommandScope | str) -> list[SlashCommand]:
        scope = CommandScope(scope)
        return [command for command in self.commands() if command.scope == scope]

    def by_category(self, category: str) -> list[SlashCommand]:
        return [command for command in self.commands() if command.category == category]

    def items(self) -> Iterator[tuple[str, SlashCommand]]:
        return iter(self._entries.items())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CommandRegistry(keys={len(self._entries)}, commands={len(self.commands())})"
