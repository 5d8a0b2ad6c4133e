# -*- coding: utf-8 -*-
"""Location: ./toontodo/utils/fs.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Async filesystem helpers.

Every call runs the blocking pathlib/shutil operation in a worker thread via
``asyncio.to_thread`` so the event loop never blocks on disk I/O. Errors are the
plain ``OSError`` subclasses raised by the OS; a missing file is always
``FileNotFoundError`` so callers can tell not-found apart from other failures.

File content is handled as bytes (UTF-8 encoded by callers) so that line
endings inside stored values are written and read back unchanged.
"""

# Standard
import asyncio
from contextlib import suppress
import os
from pathlib import Path
import shutil
import tempfile
from typing import List, Union

PathLike = Union[str, Path]


async def exists(path: PathLike) -> bool:
    """Return True if ``path`` exists.

    Args:
        path: File or directory path.

    Returns:
        bool: Whether the path exists.
    """
    return await asyncio.to_thread(Path(path).exists)


async def read_bytes(path: PathLike) -> bytes:
    """Read a whole file.

    Args:
        path: File path.

    Returns:
        bytes: File content.
    """
    return await asyncio.to_thread(Path(path).read_bytes)


def _write_bytes_atomic_sync(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then replace ``path`` with it.

    Args:
        path: Destination file.
        data: Content to write.
    """
    fd, temp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(temp_path, path)
    except BaseException:
        with suppress(OSError):
            os.unlink(temp_path)
        raise


async def write_bytes_atomic(path: PathLike, data: bytes) -> None:
    """Replace the content of ``path`` without exposing a partial write.

    Args:
        path: Destination file; its directory must exist.
        data: Content to write.
    """
    await asyncio.to_thread(_write_bytes_atomic_sync, Path(path), data)


async def make_dirs(path: PathLike) -> None:
    """Create a directory and any missing parents.

    Args:
        path: Directory path.
    """
    await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)


async def rename(src: PathLike, dst: PathLike) -> None:
    """Move ``src`` to ``dst``.

    Args:
        src: Existing path.
        dst: New path.
    """
    await asyncio.to_thread(os.rename, src, dst)


async def copy_file(src: PathLike, dst: PathLike) -> None:
    """Copy a file's content and metadata.

    Args:
        src: Source file.
        dst: Destination file.
    """
    await asyncio.to_thread(shutil.copy2, src, dst)


async def unlink(path: PathLike) -> None:
    """Delete a file.

    Args:
        path: File path.
    """
    await asyncio.to_thread(os.unlink, path)


async def list_dir(path: PathLike) -> List[str]:
    """List entry names in a directory.

    Args:
        path: Directory path.

    Returns:
        List[str]: Sorted entry names; empty if the directory is missing.
    """

    def _list() -> List[str]:
        try:
            return sorted(os.listdir(path))
        except FileNotFoundError:
            return []

    return await asyncio.to_thread(_list)
