"""Concurrent recursive filesystem walker.

The walker visits every entry below a root path, hands regular files to a
payload coroutine and merges the payload results into one flat mapping.
Entries of a directory are processed concurrently; the first hard failure
anywhere in the tree cancels the outstanding siblings and propagates
unchanged to the caller, so a failed walk never yields a partial mapping.

Blocking filesystem calls run in worker threads. A single semaphore held
by the :class:`WalkContext` bounds how many of them are in flight. It is
acquired around individual I/O calls only, never while a directory waits
for its children.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from buster.config import BusterConfig
from buster.errors import WalkerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ResultMapping = dict[str, str]
Payload = Callable[[Path, "WalkContext"], Awaitable[ResultMapping]]

# (st_dev, st_ino) of the directories between the root and the current node
Ancestry = frozenset[tuple[int, int]]


@dataclass(frozen=True, slots=True)
class WalkContext:
    """Immutable state shared by every node of one walk."""

    config: BusterConfig
    limiter: asyncio.Semaphore

    async def run_io(self, func: Callable[..., T], /, *args: Any) -> T:
        """Run a blocking filesystem call in a worker thread under the limiter."""
        async with self.limiter:
            return await asyncio.to_thread(func, *args)


async def gather_fail_fast(coros: Iterable[Awaitable[T]]) -> list[T]:
    """Await all ``coros`` concurrently, aborting on the first failure.

    On failure the remaining tasks are cancelled and awaited before the
    original exception is re-raised, so no task outlives the call.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def walk(
    path: Path,
    payload: Payload,
    config: BusterConfig,
    *,
    context: WalkContext | None = None,
) -> ResultMapping:
    """Walk ``path`` (file or directory) and merge the payload results.

    Args:
        path: Root of the walk; may be a directory or a single file
        payload: Coroutine invoked for every regular file
        config: Frozen run configuration shared by all nodes
        context: Optional pre-built context (mainly for tests)

    Returns:
        Mapping of original relative path to new relative path

    Raises:
        WalkerError: If an entry cannot be stat'ed or a directory listed
        BusterError: Any hard failure raised by the payload
    """
    if context is None:
        context = WalkContext(config=config, limiter=asyncio.Semaphore(config.max_workers))
    return await _walk_node(Path(path), payload, context, frozenset())


async def _stat(path: Path, context: WalkContext) -> os.stat_result:
    follow = context.config.follow_symlinks
    try:
        return await context.run_io(_stat_entry, path, follow)
    except OSError as exc:
        logger.debug("stat %s failed: %s", path, exc)
        raise WalkerError("Could not stat()", path=path) from exc


def _stat_entry(path: Path, follow_symlinks: bool) -> os.stat_result:
    return os.stat(path, follow_symlinks=follow_symlinks)


async def _walk_node(
    path: Path,
    payload: Payload,
    context: WalkContext,
    ancestors: Ancestry,
) -> ResultMapping:
    entry_stat = await _stat(path, context)
    mode = entry_stat.st_mode

    if stat.S_ISLNK(mode):
        # Only reachable with follow_symlinks disabled.
        logger.debug("Skipping symlink %s", path)
        return {}

    if stat.S_ISDIR(mode):
        identity = (entry_stat.st_dev, entry_stat.st_ino)
        if identity in ancestors:
            logger.warning("Skipping %s: directory cycle via symlink", path)
            return {}
        return await _walk_directory(path, payload, context, ancestors | {identity})

    if stat.S_ISREG(mode):
        return await payload(path, context)

    logger.debug("Skipping %s: neither a regular file nor a directory", path)
    return {}


async def _walk_directory(
    directory: Path,
    payload: Payload,
    context: WalkContext,
    ancestors: Ancestry,
) -> ResultMapping:
    try:
        entries = await context.run_io(os.listdir, directory)
    except OSError as exc:
        logger.debug("listdir %s failed: %s", directory, exc)
        raise WalkerError("Error while reading directory", path=directory) from exc

    if not entries:
        return {}

    sub_results = await gather_fail_fast(
        _walk_node(directory / name, payload, context, ancestors) for name in sorted(entries)
    )

    results: ResultMapping = {}
    for sub_result in sub_results:
        results.update(sub_result)
    return results
