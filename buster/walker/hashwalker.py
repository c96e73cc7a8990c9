"""Hash-and-materialize payload and its walker entry points."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from buster.config import BusterConfig
from buster.utils.hashing import hash_file_content
from buster.walker.filter import filter_by_extension
from buster.walker.fs import create_hashed_file
from buster.walker.naming import derive_hashed_name, is_fingerprinted
from buster.walker.tree import ResultMapping, WalkContext, walk

logger = logging.getLogger(__name__)


async def process_file(file_path: Path, context: WalkContext) -> ResultMapping:
    """Fingerprint one file and return its manifest entry.

    Filter, hash, derive the new name, then copy or rename. Returns an
    empty mapping for files that are skipped (extension not configured,
    the manifest itself, or a file already carrying its own fingerprint).
    Hash and filesystem failures propagate unchanged.
    """
    config = context.config

    if filter_by_extension(file_path, config.extensions) is None:
        logger.debug("%s: extension not in %s", file_path, sorted(config.extensions))
        return {}

    if file_path == config.out_file:
        logger.debug("%s: skipping the manifest file", file_path)
        return {}

    digest = await context.run_io(hash_file_content, file_path)

    if is_fingerprinted(file_path, digest, config.hash_length):
        logger.debug("%s: already fingerprinted", file_path)
        return {}

    destination = derive_hashed_name(file_path, digest, config.hash_length)
    created = await context.run_io(create_hashed_file, file_path, destination, config.mode)

    logger.debug("%s -> %s (%s)", file_path, created, config.mode)
    return {config.relative_key(file_path): config.relative_key(created)}


async def hash_walker(config: BusterConfig) -> ResultMapping:
    """Walk ``config.input`` with the hash-and-materialize payload."""
    return await walk(config.input, process_file, config)


def run_hash_walker(config: BusterConfig) -> ResultMapping:
    """Synchronous wrapper around :func:`hash_walker`."""
    return asyncio.run(hash_walker(config))
