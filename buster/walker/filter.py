"""Extension-based file filtering."""

from __future__ import annotations

import os
from collections.abc import Collection
from pathlib import Path


def get_extension(file_path: Path) -> str:
    """Return the extension of ``file_path`` without its leading dot.

    Only the final component is considered and case is preserved, so
    ``app.min.JS`` yields ``"JS"`` and dotfiles such as ``.bashrc`` yield
    ``""``.
    """
    _, extension = os.path.splitext(Path(file_path).name)
    return extension[1:]


def filter_by_extension(file_path: Path, extensions: Collection[str]) -> Path | None:
    """Match ``file_path`` against the configured extensions.

    Args:
        file_path: Path to a file
        extensions: Allowed extensions without leading dot

    Returns:
        ``file_path`` unchanged if its extension is allowed, otherwise
        ``None`` to signal that the file should be skipped
    """
    if get_extension(file_path) in extensions:
        return file_path
    return None
