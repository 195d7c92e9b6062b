"""
Hot reload of command directories.

Each watched directory gets a polling task that compares non-recursive
snapshots of its entries. Every detected change re-arms a single debounce
timer; only when the timer fires does one full reload run.
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

from slashcmd.commands.file_io import is_directory_async, list_files_async, stat_signature_async
from slashcmd.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_POLL_INTERVAL = 0.25

# name -> (mtime_ns, size)
DirectorySnapshot = dict[str, tuple[int, int]]

ReloadCallback = Callable[[], Awaitable[object]]
ChangeCallback = Callable[[Path, str], None]


async def take_snapshot_async(directory: Path) -> DirectorySnapshot:
    """Signature of every regular file directly inside the directory."""
    snapshot: DirectorySnapshot = {}
    for path in await list_files_async(directory):
        signature = await stat_signature_async(path)
        if signature is not None:
            snapshot[path.name] = signature
    return snapshot


def diff_snapshots(before: DirectorySnapshot, after: DirectorySnapshot) -> list[tuple[str, str]]:
    """
    List (name, change) pairs between two snapshots.

    Examples:
        >>> diff_snapshots({"a.md": (1, 1)}, {"a.md": (2, 1), "b.json": (1, 1)})
        [('a.md', 'modified'), ('b.json', 'added')]
    """
    changes: list[tuple[str, str]] = []
    for name in sorted(before.keys() | after.keys()):
        if name not in after:
            changes.append((name, "removed"))
        elif name not in before:
            changes.append((name, "added"))
        elif before[name] != after[name]:
            changes.append((name, "modified"))
    return changes


class ReloadDebouncer:
    """
    Collapses bursts of change notifications into one reload.

    Holds at most one pending timer handle. notify() cancels and re-arms it.
    Reloads never overlap: a timer firing while one runs marks the registry
    dirty, and exactly one more reload follows the running one.
    After stop() nothing is scheduled again; a reload already running is
    left to finish.
    """

    def __init__(self, callback: ReloadCallback, delay: float = DEFAULT_DEBOUNCE_SECONDS):
        self.callback = callback
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        self._dirty = False
        self._stopped = False

    @property
    def pending(self) -> bool:
        """True while a reload is scheduled but has not fired yet."""
        return self._handle is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def in_flight(self) -> int:
        return 0 if self._task is None or self._task.done() else 1

    def notify(self) -> None:
        """Record a change; (re)start the quiet period."""
        if self._stopped:
            return
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._stopped:
            return
        if self.in_flight:
            self._dirty = True
            return
        self._task = asyncio.get_running_loop().create_task(self._run_reload())

    async def _run_reload(self) -> None:
        while True:
            self._dirty = False
            try:
                await self.callback()
            except Exception as e:
                # A failed reload keeps the previous registry and the watch session
                logger.error("command_reload_failed", error=str(e), error_type=type(e).__name__)
            if not self._dirty or self._stopped:
                return
            logger.debug("command_reload_rerun")

    async def wait_idle(self) -> None:
        """Wait for a reload that already started (test and shutdown helper)."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def stop(self) -> None:
        """Cancel the pending timer and refuse further notifications."""
        self._stopped = True
        self._dirty = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class DirectoryWatcher:
    """Polls a set of directories and reports per-file changes."""

    def __init__(self, on_change: ChangeCallback, poll_interval: float = DEFAULT_POLL_INTERVAL):
        self.on_change = on_change
        self.poll_interval = poll_interval
        self._tasks: dict[Path, asyncio.Task] = {}
        self._stopped = False

    @property
    def watched_directories(self) -> list[Path]:
        return list(self._tasks)

    async def watch_async(self, directory: Path) -> bool:
        """
        Start polling one directory.

        Returns:
            True if the directory is now watched. Missing directories and
            directories that cannot be read are skipped (the latter logged).
        """
        if self._stopped or directory in self._tasks:
            return directory in self._tasks

        try:
            if not await is_directory_async(directory):
                return False
            snapshot = await take_snapshot_async(directory)
        except OSError as e:
            logger.warning("command_directory_watch_failed", directory=str(directory), error=str(e))
            return False

        self._tasks[directory] = asyncio.create_task(self._poll_async(directory, snapshot))
        logger.debug("command_directory_watch_started", directory=str(directory))
        return True

    async def _poll_async(self, directory: Path, snapshot: DirectorySnapshot) -> None:
        while True:
            try:
                await asyncio.sleep(self.poll_interval)

                current = await take_snapshot_async(directory)
                changes = diff_snapshots(snapshot, current)
                snapshot = current

                for name, change in changes:
                    if self._stopped:
                        return
                    logger.debug("command_file_changed", file=str(directory / name), change=change)
                    self.on_change(directory / name, change)

            except asyncio.CancelledError:
                logger.debug("command_directory_watch_stopped", directory=str(directory))
                raise
            except OSError as e:
                logger.warning("command_directory_poll_failed", directory=str(directory), error=str(e))

    def stop(self) -> None:
        """Cancel every polling task synchronously."""
        self._stopped = True
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()


class CommandWatcher:
    """
    Watch session for a set of scope directories.

    Change notifications from the directory watcher feed the debouncer,
    which invokes the reload callback after the quiet period.
    """

    def __init__(
        self,
        directories: list[Path],
        reload_callback: ReloadCallback,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.directories = list(directories)
        self.debouncer = ReloadDebouncer(reload_callback, debounce_seconds)
        self.directory_watcher = DirectoryWatcher(self.notify, poll_interval)
        self._active = False

    @property
    def is_watching(self) -> bool:
        return self._active

    async def start_async(self) -> None:
        if self._active:
            return
        self._active = True
        for directory in self.directories:
            await self.directory_watcher.watch_async(directory)

    def notify(self, path: Path | None = None, change: str = "modified") -> None:
        """Entry point for raw change notifications."""
        if not self._active:
            return
        self.debouncer.notify()

    def stop(self) -> None:
        """Close every watch and cancel any pending reload."""
        self._active = False
        self.directory_watcher.stop()
        self.debouncer.stop()
