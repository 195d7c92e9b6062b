"""
Executable-module command parser.

A command module is a Python file exposing ``COMMAND`` (or ``command``)
as either a SlashCommand or a mapping with the same shape. Loaded code
runs with full host privilege; there is no sandbox.
"""

import importlib.util
import itertools
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from slashcmd.commands.file_io import read_text_async
from slashcmd.commands.parsers.base import CommandFileParser
from slashcmd.commands.types import CommandSourceFormat, SlashCommand
from slashcmd.shared.domain.exceptions import CommandExportError, CommandLoadError
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

PRIMARY_EXPORT = "COMMAND"
FALLBACK_EXPORT = "command"

_load_counter = itertools.count(1)


def _unique_module_name(path: Path) -> str:
    """Fresh module identity per load so edited files are re-executed."""
    return f"slashcmd_user_command_{path.stem.replace('-', '_')}_{next(_load_counter)}"


class ModuleCommandParser(CommandFileParser):
    """Loads a command object from a Python module file."""

    source_format = CommandSourceFormat.MODULE

    async def parse(self, path: Path, project_root: Path | None = None) -> Any | None:
        try:
            source = await read_text_async(path)
            module = self._exec_module(path, source)
            return self._extract_command(module, path)
        except CommandLoadError as e:
            logger.error("command_module_load_failed", file=str(path), error=str(e))
            return None
        except Exception as e:
            # Import-time failures in user code must not escape the loader
            logger.error(
                "command_module_load_failed",
                file=str(path),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    def _exec_module(self, path: Path, source: str) -> Any:
        module_name = _unique_module_name(path)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None:
            raise CommandLoadError(f"Cannot create module spec for {path}", {"file": str(path)})

        module = importlib.util.module_from_spec(spec)
        # Compiled from the text just read; bytecode caches are bypassed
        code = compile(source, str(path), "exec")

        # Registered only while executing, for dataclasses and pickling lookups
        sys.modules[module_name] = module
        try:
            # Not spec.loader.exec_module: it can reuse a __pycache__ entry
            # stamped with the same whole-second mtime as an edited file
            exec(code, module.__dict__)
        finally:
            sys.modules.pop(module_name, None)
        return module

    def _extract_command(self, module: Any, path: Path) -> Any:
        candidate = getattr(module, PRIMARY_EXPORT, None)
        if candidate is None:
            candidate = getattr(module, FALLBACK_EXPORT, None)

        if not isinstance(candidate, (SlashCommand, Mapping)):
            raise CommandExportError(
                f"No valid command export found in {path.name} "
                f"(expected {PRIMARY_EXPORT} or {FALLBACK_EXPORT})",
                {"file": str(path)},
            )
        return candidate
