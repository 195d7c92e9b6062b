"""Base class for command definition parsers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from slashcmd.commands.types import CommandSourceFormat


class CommandFileParser(ABC):
    """
    Turns one command file into a candidate record.

    Parsers are stateless. A file that is not a loadable command yields
    None (after logging why); parsers never raise for bad user content.
    """

    source_format: CommandSourceFormat

    @abstractmethod
    async def parse(self, path: Path, project_root: Path | None = None) -> Any | None:
        """
        Parse a command file.

        Args:
            path: File to parse
            project_root: Root used as the default working directory of shell actions

        Returns:
            Candidate record (SlashCommand or mapping) or None if the file is unusable
        """
        pass
