"""Tests for the concurrent tree walker."""

from __future__ import annotations

import asyncio
import os
import threading
import time
from pathlib import Path

import pytest

from buster.errors import HashError, WalkerError
from buster.walker.tree import WalkContext, gather_fail_fast, walk


async def record_payload(path: Path, context: WalkContext) -> dict[str, str]:
    """Payload that maps every file to a marker without touching it."""
    return {context.config.relative_key(path): "seen"}


def run_walk(path: Path, payload, config) -> dict[str, str]:
    return asyncio.run(walk(path, payload, config))


def test_walk_empty_directory(temp_dir: Path, make_config):
    root = temp_dir / "empty"
    root.mkdir()

    assert run_walk(root, record_payload, make_config(root)) == {}


def test_walk_visits_every_file_with_relative_keys(asset_tree: Path, make_config):
    result = run_walk(asset_tree, record_payload, make_config(asset_tree))

    assert result == {"a.js": "seen", "sub/b.css": "seen", "sub/skip.txt": "seen"}


def test_walk_deeply_nested_tree(temp_dir: Path, make_config):
    root = temp_dir / "deep"
    current = root
    for level in range(12):
        current = current / f"level{level}"
    current.mkdir(parents=True)
    (current / "leaf.js").write_text("leaf")

    result = run_walk(root, record_payload, make_config(root))

    expected_key = "/".join(f"level{level}" for level in range(12)) + "/leaf.js"
    assert result == {expected_key: "seen"}


def test_walk_single_file_root(asset_tree: Path, make_config):
    single = asset_tree / "a.js"

    result = run_walk(single, record_payload, make_config(single))

    assert result == {"a.js": "seen"}


def test_walk_payload_skip_contributes_nothing(asset_tree: Path, make_config):
    async def only_css(path: Path, context: WalkContext) -> dict[str, str]:
        if path.suffix != ".css":
            return {}
        return {context.config.relative_key(path): "css"}

    result = run_walk(asset_tree, only_css, make_config(asset_tree))

    assert result == {"sub/b.css": "css"}


def test_walk_stat_failure_aborts_with_walker_error(
    asset_tree: Path, make_config, monkeypatch
):
    import buster.walker.tree as tree_module

    real_stat_entry = tree_module._stat_entry
    vanished = asset_tree / "sub" / "b.css"

    def flaky_stat(path: Path, follow_symlinks: bool) -> os.stat_result:
        if path == vanished:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        return real_stat_entry(path, follow_symlinks)

    monkeypatch.setattr(tree_module, "_stat_entry", flaky_stat)

    with pytest.raises(WalkerError) as excinfo:
        run_walk(asset_tree, record_payload, make_config(asset_tree))

    assert excinfo.value.kind == "walker"
    assert excinfo.value.path == vanished
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_walk_missing_root_raises_walker_error(temp_dir: Path, make_config, asset_tree: Path):
    config = make_config(asset_tree)

    with pytest.raises(WalkerError, match="Could not stat"):
        run_walk(temp_dir / "does-not-exist", record_payload, config)


def test_walk_listing_failure_raises_walker_error(asset_tree: Path, make_config, monkeypatch):
    import buster.walker.tree as tree_module

    real_listdir = os.listdir

    def failing_listdir(path):
        if Path(path).name == "sub":
            raise PermissionError(13, "Permission denied", str(path))
        return real_listdir(path)

    monkeypatch.setattr(tree_module.os, "listdir", failing_listdir)

    with pytest.raises(WalkerError, match="Error while reading directory") as excinfo:
        run_walk(asset_tree, record_payload, make_config(asset_tree))

    assert excinfo.value.path == asset_tree / "sub"


def test_walk_fails_fast_and_cancels_siblings(temp_dir: Path, make_config):
    root = temp_dir / "tree"
    (root / "slow").mkdir(parents=True)
    for index in range(5):
        (root / "slow" / f"wait{index}.js").write_text("wait")
    (root / "bad.js").write_text("bad")

    cancelled: list[str] = []
    failure = HashError("Error during hash calculation", path=root / "bad.js")

    async def payload(path: Path, context: WalkContext) -> dict[str, str]:
        if path.name == "bad.js":
            await asyncio.sleep(0.05)
            raise failure
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            cancelled.append(path.name)
            raise
        return {path.name: "never"}

    started = time.monotonic()
    with pytest.raises(HashError) as excinfo:
        run_walk(root, payload, make_config(root))

    assert excinfo.value is failure
    assert time.monotonic() - started < 10
    assert sorted(cancelled) == [f"wait{index}.js" for index in range(5)]


def test_walk_bounds_concurrent_io(temp_dir: Path, make_config):
    root = temp_dir / "wide"
    root.mkdir()
    for index in range(20):
        (root / f"file{index}.js").write_text(str(index))

    lock = threading.Lock()
    active = 0
    peak = 0

    def blocking_io() -> None:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1

    async def payload(path: Path, context: WalkContext) -> dict[str, str]:
        await context.run_io(blocking_io)
        return {context.config.relative_key(path): "ok"}

    result = run_walk(root, payload, make_config(root, max_workers=2))

    assert len(result) == 20
    assert 1 <= peak <= 2


def test_gather_fail_fast_returns_results_in_order():
    async def value(number: int) -> int:
        await asyncio.sleep(0.01 * (5 - number))
        return number

    async def run() -> list[int]:
        return await gather_fail_fast(value(number) for number in range(5))

    assert asyncio.run(run()) == [0, 1, 2, 3, 4]


symlinks_supported = pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges")


@symlinks_supported
def test_walk_skips_symlink_cycles(asset_tree: Path, make_config):
    os.symlink(asset_tree, asset_tree / "sub" / "loop")

    result = run_walk(asset_tree, record_payload, make_config(asset_tree))

    assert result == {"a.js": "seen", "sub/b.css": "seen", "sub/skip.txt": "seen"}


@symlinks_supported
def test_walk_follows_file_symlinks(asset_tree: Path, make_config, temp_dir: Path):
    outside = temp_dir / "vendor.js"
    outside.write_text("vendor")
    os.symlink(outside, asset_tree / "vendor.js")

    result = run_walk(asset_tree, record_payload, make_config(asset_tree))

    assert result["vendor.js"] == "seen"


@symlinks_supported
def test_walk_without_following_skips_symlinks(asset_tree: Path, make_config, temp_dir: Path):
    outside = temp_dir / "vendor.js"
    outside.write_text("vendor")
    os.symlink(outside, asset_tree / "vendor.js")
    os.symlink(asset_tree / "sub", asset_tree / "linked-sub")

    config = make_config(asset_tree, follow_symlinks=False)
    result = run_walk(asset_tree, record_payload, config)

    assert result == {"a.js": "seen", "sub/b.css": "seen", "sub/skip.txt": "seen"}
