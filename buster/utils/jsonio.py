"""JSON writing helpers with durability guarantees."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from buster.utils.paths import ensure_dir


def dumps_manifest(payload: Mapping[str, Any]) -> str:
    """Serialize ``payload`` in the canonical, byte-stable manifest format."""
    return json.dumps(dict(payload), indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    """Write ``payload`` to ``path`` atomically as a JSON object.

    The write is performed via a temporary file in the destination
    directory followed by an ``os.replace`` once the contents are flushed
    and fsynced, so readers never observe a half-written manifest.
    """
    destination = Path(path)
    ensure_dir(destination.parent)

    serialized = dumps_manifest(payload)

    fd: int | None = None
    tmp_path: str | None = None

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(destination.parent),
            prefix=destination.name,
            suffix=".tmp",
            text=True,
        )

        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fd = None  # Ownership transferred to file object
            handle.write(serialized)
            handle.flush()
            os.fsync(handle.fileno())

        os.replace(tmp_path, destination)
        tmp_path = None
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
