"""Derivation of fingerprinted filenames."""

from __future__ import annotations

import os
from pathlib import Path


def _truncate_digest(digest: str, hash_length: int) -> str:
    if hash_length < 1:
        raise ValueError(f"hash_length must be at least 1, got {hash_length}")
    return digest[: min(hash_length, len(digest))]


def derive_hashed_name(file_path: Path, digest: str, hash_length: int) -> Path:
    """Insert the truncated ``digest`` between base name and extension.

    ``lib/app.js`` with digest ``abcdef1234567890`` and length 10 becomes
    ``lib/app.abcdef1234.js``. A length beyond the digest uses the whole
    digest.

    Raises:
        ValueError: If ``hash_length`` is smaller than 1
    """
    file_path = Path(file_path)
    base, extension = os.path.splitext(file_path.name)
    fingerprint = _truncate_digest(digest, hash_length)
    return file_path.with_name(f"{base}.{fingerprint}{extension}")


def is_fingerprinted(file_path: Path, digest: str, hash_length: int) -> bool:
    """Return True if ``file_path`` already carries its own content fingerprint.

    Such files are the output of an earlier run and must not be hashed again.
    """
    base, _ = os.path.splitext(Path(file_path).name)
    return base.endswith(f".{_truncate_digest(digest, hash_length)}")
