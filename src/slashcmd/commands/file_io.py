"""Async filesystem helpers for command discovery."""

from pathlib import Path

import aiofiles
import aiofiles.os


async def read_text_async(path: Path) -> str:
    """Read a command file as UTF-8 text."""
    async with aiofiles.open(path, encoding="utf-8") as f:
        return await f.read()


async def is_directory_async(path: Path) -> bool:
    return await aiofiles.os.path.isdir(path)


async def is_file_async(path: Path) -> bool:
    return await aiofiles.os.path.isfile(path)


async def list_files_async(directory: Path) -> list[Path]:
    """
    List regular files directly inside a directory, sorted by name.

    Subdirectories are not descended into. A missing directory yields an
    empty list.
    """
    if not await is_directory_async(directory):
        return []

    entries = sorted(await aiofiles.os.listdir(directory))
    files: list[Path] = []
    for entry in entries:
        candidate = directory / entry
        if await is_file_async(candidate):
            files.append(candidate)
    return files


async def stat_signature_async(path: Path) -> tuple[int, int] | None:
    """Return (mtime_ns, size) for change detection, or None if the file vanished."""
    try:
        stat_result = await aiofiles.os.stat(path)
    except FileNotFoundError:
        return None
    return stat_result.st_mtime_ns, stat_result.st_size
