"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from buster.config import BusterConfig, Settings, build_config


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir).resolve()
    finally:
        # Force garbage collection to release any file handles
        gc.collect()
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Settings independent of the developer's environment."""
    return Settings(
        extensions=["js", "css"],
        hash_length=10,
        mode="copy",
        out_file=temp_dir / "asset-manifest.json",
        max_workers=4,
        follow_symlinks=True,
    )


@pytest.fixture
def override_settings(test_settings: Settings) -> Generator[Settings, None, None]:
    """Install ``test_settings`` as the global settings instance."""

    import buster.config as config_module

    original_settings = getattr(config_module, "_settings", None)
    config_module._settings = test_settings

    try:
        yield test_settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def asset_tree(temp_dir: Path) -> Path:
    """Create a small asset tree with nested and filtered files.

    assets/
        a.js
        sub/b.css
        sub/skip.txt
    """
    root = temp_dir / "assets"
    sub = root / "sub"
    sub.mkdir(parents=True)

    (root / "a.js").write_text("console.log('a');\n")
    (sub / "b.css").write_text("body { color: red; }\n")
    (sub / "skip.txt").write_text("not an asset\n")

    return root


@pytest.fixture
def make_config(test_settings: Settings):
    """Build a validated configuration for a given input and overrides."""

    def _make(input_path: Path, **overrides) -> BusterConfig:
        return build_config(input_path, settings=test_settings, **overrides)

    return _make
