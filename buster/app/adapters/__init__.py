"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .manifest import JSONManifestWriter

__all__ = [
    "JSONManifestWriter",
]
