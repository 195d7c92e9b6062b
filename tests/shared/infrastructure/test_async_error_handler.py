"""
Tests for the async error handler decorator.

Validates logging, transformation, fallback and re-raise behavior.
"""

import pytest

from slashcmd.shared.domain.exceptions import CommandLoadError, SlashCmdError
from slashcmd.shared.infrastructure.error_handler import async_error_handler


class TestAsyncErrorHandler:
    """Test suite for async_error_handler decorator."""

    @pytest.mark.asyncio
    async def test_successful_execution_passes_through(self):
        @async_error_handler()
        async def successful_function(value: int) -> int:
            return value * 2

        assert await successful_function(5) == 10

    @pytest.mark.asyncio
    async def test_error_reraised_by_default(self):
        @async_error_handler()
        async def failing_function():
            raise ValueError("Test error")

        with pytest.raises(ValueError, match="Test error"):
            await failing_function()

    @pytest.mark.asyncio
    async def test_fallback_value_returned_on_error(self):
        @async_error_handler(fallback_value=list)
        async def failing_function():
            raise ValueError("Test error")

        assert await failing_function() == []

    @pytest.mark.asyncio
    async def test_error_transformation(self):
        @async_error_handler(error_map={OSError: CommandLoadError})
        async def failing_function():
            raise OSError("disk unreadable")

        with pytest.raises(CommandLoadError, match="disk unreadable") as exc_info:
            await failing_function()

        assert isinstance(exc_info.value, SlashCmdError)
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_swallow_without_fallback(self):
        @async_error_handler(reraise=False, event="command_reload_failed")
        async def failing_function(path=None):
            raise RuntimeError("boom")

        assert await failing_function(path="x") is None

    @pytest.mark.asyncio
    async def test_context_keys_bind_positional_arguments(self, monkeypatch):
        from slashcmd.shared.infrastructure import error_handler

        logged = []
        monkeypatch.setattr(error_handler, "_log_failure", lambda *args: logged.append(args))

        @async_error_handler(reraise=False, context_keys=["path"], event="load_failed")
        async def failing_function(path):
            raise RuntimeError("boom")

        await failing_function("a.json")

        event_name, log_level, error, context = logged[0]
        assert event_name == "load_failed"
        assert log_level == "error"
        assert context == {"path": "a.json"}
