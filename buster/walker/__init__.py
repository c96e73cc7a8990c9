"""Filesystem walking and per-file fingerprinting."""

from buster.walker.hashwalker import hash_walker, process_file, run_hash_walker
from buster.walker.tree import ResultMapping, WalkContext, walk

__all__ = [
    "ResultMapping",
    "WalkContext",
    "hash_walker",
    "process_file",
    "run_hash_walker",
    "walk",
]
