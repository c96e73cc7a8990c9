"""Utility modules for common operations."""

from buster.utils.hashing import hash_file_content
from buster.utils.jsonio import atomic_write_json, dumps_manifest
from buster.utils.paths import ensure_dir, get_base_dir, get_relative_key

__all__ = [
    "atomic_write_json",
    "dumps_manifest",
    "ensure_dir",
    "get_base_dir",
    "get_relative_key",
    "hash_file_content",
]
