"""Manifest writer port interface."""

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol


class ManifestWriterPort(Protocol):
    """Port interface for persisting a manifest mapping.

    Side effects: Writes one file (offline).
    """

    def write(self, path: Path, manifest: Mapping[str, str]) -> Path:
        """Serialize ``manifest`` to ``path``.

        Args:
            path: Output file
            manifest: Original relative path -> hashed relative path

        Returns:
            The written path

        Raises:
            ManifestError: If the file could not be written
        """
        ...
