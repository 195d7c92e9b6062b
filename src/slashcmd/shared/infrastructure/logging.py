"""
Structured logging configuration using structlog.

Every module logs through get_logger(__name__) with snake_case event names
and keyword context (file=..., scope=..., errors=[...]).
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

from slashcmd.shared.infrastructure.config import Settings, settings as default_settings

# Event keys that carry filesystem locations
PATH_KEYS = ("file", "directory", "directories")


def shorten_home_paths(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Render paths under the user's home as ``~/...``.

    Personal-scope command files live in the home directory, so most load
    events would otherwise repeat the full home prefix.
    """
    home = str(Path.home())

    def shorten(value: Any) -> Any:
        if isinstance(value, str) and value.startswith(home + "/"):
            return "~" + value[len(home):]
        return value

    for key in PATH_KEYS:
        value = event_dict.get(key)
        if isinstance(value, list):
            event_dict[key] = [shorten(item) for item in value]
        elif value is not None:
            event_dict[key] = shorten(value)
    return event_dict


def configure_logging(stream: Any = None, settings: Settings | None = None) -> None:
    """
    Configure structlog for the application.

    Development renders human-readable lines, production renders JSON.
    The debug flag lowers the level to DEBUG so load, skip and reload events
    become visible.
    """
    settings = settings or default_settings
    stream = stream or sys.stderr

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        shorten_home_paths,
    ]
    if settings.is_development:
        colors = bool(getattr(stream, "isatty", lambda: False)())
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    else:
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level_name = "DEBUG" if settings.debug else settings.log_level
    logging.basicConfig(format="%(message)s", stream=stream, level=getattr(logging, level_name), force=True)


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("command_loaded", name="build", scope="project")
    """
    return structlog.get_logger(name)
