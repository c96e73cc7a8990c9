"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from buster.app import BusterService
from buster.app.adapters import JSONManifestWriter
from buster.app.ports import ManifestWriterPort
from buster.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    service: BusterService
    manifest_writer: ManifestWriterPort


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Create the application container from ``settings`` (global settings by default)."""

    active_settings = settings or get_settings()
    manifest_writer = JSONManifestWriter()
    service = BusterService(manifest_writer=manifest_writer)

    return ApplicationContainer(
        settings=active_settings,
        service=service,
        manifest_writer=manifest_writer,
    )
