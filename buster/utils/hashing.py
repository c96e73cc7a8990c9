"""Content digests used as filename fingerprints."""

import hashlib
from pathlib import Path

from buster.errors import HashError

DEFAULT_CHUNK_SIZE = 65536


def hash_file_content(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Return the lowercase hex MD5 digest of a file's bytes.

    The file is streamed so memory use stays bounded. MD5 serves as a
    stable cache-busting fingerprint only.

    Raises:
        HashError: If the file cannot be opened or read
    """
    md5 = hashlib.md5()
    try:
        with open(file_path, "rb") as handle:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                md5.update(chunk)
    except OSError as exc:
        raise HashError("Error during hash calculation", path=file_path) from exc
    return md5.hexdigest()
