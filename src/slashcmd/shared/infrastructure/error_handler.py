"""
Async error handling decorator.

Reload and watch entry points run from timer callbacks and background tasks,
where an escaping exception would only surface as an unretrieved task error.
Wrapping them logs the failure under a stable event name instead.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any

from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


def _bound_context(signature: inspect.Signature, args: tuple, kwargs: dict, keys: list[str]) -> dict[str, Any]:
    """Pick the named call arguments (positional or keyword) for the log line."""
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {key: kwargs[key] for key in keys if key in kwargs}
    return {key: bound.arguments[key] for key in keys if key in bound.arguments}


def _log_failure(event_name: str, log_level: str, error: BaseException, context: dict[str, Any]) -> None:
    log_method = getattr(logger, log_level, logger.error)
    log_method(event_name, error=str(error), error_type=type(error).__name__, **context)


def async_error_handler(
    fallback_value: Any = None,
    log_level: str = "error",
    error_map: dict[type[Exception], type[Exception]] | None = None,
    context_keys: list[str] | None = None,
    reraise: bool = True,
    event: str | None = None,
):
    """
    Log failures of an async callable under one event name.

    Args:
        fallback_value: Returned on error. A callable is invoked to produce it.
        log_level: structlog method used for the failure line
        error_map: Exception translation {SourceType: TargetType}
        context_keys: Call arguments copied into the log line
        reraise: Re-raise (after translation) when there is no fallback
        event: Log event name (defaults to "<qualname>_failed")

    Example:
        ```python
        @async_error_handler(reraise=False, event="command_reload_failed")
        async def reload_commands_async(self):
            ...
        ```
    """

    def decorator(fn: Callable) -> Callable:
        event_name = event or f"{fn.__qualname__}_failed"
        signature = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except Exception as e:
                target_type = (error_map or {}).get(type(e))
                translated = target_type(str(e)) if target_type else e

                context = _bound_context(signature, args, kwargs, context_keys or [])
                _log_failure(event_name, log_level, translated, context)

                if fallback_value is not None:
                    return fallback_value() if callable(fallback_value) else fallback_value
                if not reraise:
                    return None
                if translated is e:
                    raise
                raise translated from e

        return wrapper

    return decorator
