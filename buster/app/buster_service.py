"""Fingerprinting run orchestration built on application ports."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from buster.app.ports import ManifestWriterPort
from buster.config import BusterConfig
from buster.walker import ResultMapping, hash_walker

logger = logging.getLogger(__name__)

StageStatus = Literal["pending", "completed", "skipped", "failed"]

WalkerFunc = Callable[[BusterConfig], Awaitable[ResultMapping]]


@dataclass(slots=True)
class PipelineStage:
    """Represents the status of a run phase."""

    name: str
    status: StageStatus = "pending"
    detail: str | None = None
    duration_seconds: float | None = None
    metrics: dict[str, Any] | None = None


class BusterRunResult(BaseModel):
    """Summary of a fingerprinting run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    manifest: dict[str, str] = Field(default_factory=dict)
    manifest_path: Path
    stages: list[PipelineStage] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class BusterService:
    """Orchestrate walk → manifest without direct file I/O."""

    def __init__(
        self,
        *,
        manifest_writer: ManifestWriterPort,
        walker: WalkerFunc = hash_walker,
    ) -> None:
        self._manifest_writer = manifest_writer
        self._walker = walker

    @contextmanager
    def _stage(
        self,
        stages: list[PipelineStage],
        name: str,
    ) -> Iterator[PipelineStage]:
        """Context manager to standardize stage error handling."""

        stage = PipelineStage(name=name)
        stages.append(stage)
        start_time = time.monotonic()
        try:
            yield stage
        except BaseException as exc:
            stage.status = "failed"
            stage.detail = str(exc)
            raise
        else:
            if stage.status == "pending":
                stage.status = "completed"
        finally:
            stage.duration_seconds = time.monotonic() - start_time

    def run(self, config: BusterConfig) -> BusterRunResult:
        """Execute a full run: fingerprint every matching file, then write the manifest.

        The manifest is only written after the walk completed without a
        hard failure; any failure propagates to the caller.
        """
        return asyncio.run(self.run_async(config))

    async def run_async(self, config: BusterConfig) -> BusterRunResult:
        stages: list[PipelineStage] = []
        notes: list[str] = []

        logger.debug("Running with configuration %s", config.model_dump())

        with self._stage(stages, "walk") as stage:
            manifest = await self._walker(config)
            stage.detail = f"{len(manifest)} files fingerprinted ({config.mode})"
            stage.metrics = {"fingerprinted_count": len(manifest)}

        with self._stage(stages, "manifest") as stage:
            manifest_path = self._manifest_writer.write(config.out_file, manifest)
            stage.detail = f"Manifest written to {manifest_path}"

        notes.append(f"Manifest written to {manifest_path}")
        if not manifest:
            notes.append(
                "No files matched extensions: " + ", ".join(sorted(config.extensions))
            )

        return BusterRunResult(
            manifest=manifest,
            manifest_path=manifest_path,
            stages=stages,
            notes=notes,
        )
