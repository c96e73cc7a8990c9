"""Path utilities for manifest keys and output locations."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, creating if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_base_dir(input_path: Path) -> Path:
    """Return the directory manifest keys are relative to."""
    if input_path.is_dir():
        return input_path
    return input_path.parent


def get_relative_key(path: Path, base: Path) -> str:
    """Get the manifest key for ``path`` relative to ``base``.

    Keys always use forward slashes so manifests are portable between
    platforms.
    """
    try:
        return Path(path).relative_to(base).as_posix()
    except ValueError:
        raise ValueError(f"Path {path} is outside of {base}") from None


def compute_common_path_length(input_path: Path, *, is_dir: bool) -> int:
    """Number of leading characters stripped from absolute paths to form keys.

    For a directory this is the directory plus one separator. For a single
    file it is the offset of the file's base name.
    """
    base = str(input_path) if is_dir else str(input_path.parent)
    if base.endswith(os.sep):
        return len(base)
    return len(base) + len(os.sep)
