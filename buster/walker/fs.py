"""Creation of fingerprinted files by copying or renaming."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from buster.config import MODE_COPY, MODE_RENAME
from buster.errors import FileSystemError, UnsupportedModeError

logger = logging.getLogger(__name__)


def copy_file(source: Path, destination: Path) -> Path:
    """Copy ``source`` to ``destination``, replacing an existing destination.

    The bytes go to a temporary file beside ``destination`` which is then
    moved into place with ``os.replace``. A concurrent reader of an existing
    destination keeps seeing the complete old file, never a truncated one.

    Not meant to be called directly, :func:`create_hashed_file` selects the
    operation from the configured mode.
    """
    destination = Path(destination)
    tmp_path: str | None = None

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(destination.parent),
            prefix=f".{destination.name}.",
            suffix=".tmp",
        )
        os.close(fd)
        shutil.copy2(source, tmp_path)
        os.replace(tmp_path, destination)
        tmp_path = None
    except OSError as exc:
        logger.debug("copy %s -> %s failed: %s", source, destination, exc)
        raise FileSystemError("Could not copy file", path=source) from exc
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
    return destination


def rename_file(source: Path, destination: Path) -> Path:
    """Move ``source`` to ``destination``.

    ``os.replace`` overwrites an existing destination on every platform and
    fails across filesystems.
    """
    try:
        os.replace(source, destination)
    except OSError as exc:
        logger.debug("rename %s -> %s failed: %s", source, destination, exc)
        raise FileSystemError("Could not rename file", path=source) from exc
    return Path(destination)


FILE_OPERATIONS: dict[str, Callable[[Path, Path], Path]] = {
    MODE_COPY: copy_file,
    MODE_RENAME: rename_file,
}


def create_hashed_file(source: Path, destination: Path, mode: str) -> Path:
    """Create the fingerprinted file and return its path.

    Args:
        source: The original file
        destination: The fingerprinted path from ``derive_hashed_name``
        mode: ``"copy"`` keeps the original, ``"rename"`` moves it

    Raises:
        UnsupportedModeError: If ``mode`` is unknown
        FileSystemError: If the filesystem operation fails
    """
    try:
        operation = FILE_OPERATIONS[mode]
    except KeyError:
        raise UnsupportedModeError(f"Unknown mode {mode!r}", path=source) from None
    return operation(source, destination)
