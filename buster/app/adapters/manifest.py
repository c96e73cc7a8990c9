"""JSON manifest writer."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from buster.app.ports import ManifestWriterPort
from buster.errors import ManifestError
from buster.utils.jsonio import atomic_write_json

logger = logging.getLogger(__name__)


class JSONManifestWriter(ManifestWriterPort):
    """Write the manifest as one flat, key-sorted JSON object."""

    def write(self, path: Path, manifest: Mapping[str, str]) -> Path:
        destination = Path(path)
        try:
            atomic_write_json(destination, manifest)
        except OSError as exc:
            logger.debug("writing manifest %s failed: %s", destination, exc)
            raise ManifestError("Could not create manifest file", path=destination) from exc
        logger.debug("manifest with %d entries written to %s", len(manifest), destination)
        return destination
