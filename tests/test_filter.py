"""Tests for extension filtering."""

from pathlib import Path

from buster.walker.filter import filter_by_extension, get_extension


def test_get_extension():
    assert get_extension(Path("lib/app.js")) == "js"
    assert get_extension(Path("lib/app.min.css")) == "css"
    assert get_extension(Path("archive.tar.gz")) == "gz"
    assert get_extension(Path("Makefile")) == ""
    assert get_extension(Path(".bashrc")) == ""
    assert get_extension(Path("dir.d/README")) == ""


def test_filter_returns_path_when_extension_matches():
    path = Path("/srv/static/testing.ext")
    assert filter_by_extension(path, {"ext"}) is path


def test_filter_rejects_other_extensions():
    assert filter_by_extension(Path("testing.ext"), {"txe"}) is None
    assert filter_by_extension(Path("style.css"), ["js"]) is None


def test_filter_is_case_sensitive():
    assert filter_by_extension(Path("APP.JS"), {"js"}) is None
    assert filter_by_extension(Path("APP.JS"), {"JS"}) == Path("APP.JS")


def test_files_without_extension_need_empty_extension():
    assert filter_by_extension(Path("LICENSE"), {"js", "css"}) is None
    assert filter_by_extension(Path("LICENSE"), {""}) == Path("LICENSE")
