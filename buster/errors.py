"""Failure taxonomy shared by the walker, the service and the CLI.

Every hard failure carries an explicit ``kind`` tag so callers can route it
(e.g. to an exit code) without inspecting the class hierarchy. A filtered
file is not a failure at all and never appears here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

FailureKind = Literal["config", "hash", "filesystem", "walker", "manifest"]

PROCESSING_KINDS: frozenset[FailureKind] = frozenset(
    {"hash", "filesystem", "walker", "manifest"}
)


class BusterError(Exception):
    """Base class for all Buster failures."""

    kind: FailureKind

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    @property
    def is_processing_error(self) -> bool:
        return self.kind in PROCESSING_KINDS

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class ConfigError(BusterError):
    """Raised when the run configuration is missing or invalid."""

    kind: FailureKind = "config"


class HashError(BusterError):
    """Raised when a file's content could not be read for hashing."""

    kind: FailureKind = "hash"


class FileSystemError(BusterError):
    """Raised when copying or renaming a file fails."""

    kind: FailureKind = "filesystem"


class UnsupportedModeError(FileSystemError):
    """Raised when a materialization mode is neither copy nor rename."""


class WalkerError(BusterError):
    """Raised when an entry cannot be stat'ed or a directory cannot be listed."""

    kind: FailureKind = "walker"


class ManifestError(BusterError):
    """Raised when the manifest file could not be written."""

    kind: FailureKind = "manifest"
