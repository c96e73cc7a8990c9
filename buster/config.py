"""Configuration management with Pydantic.

``Settings`` holds user defaults (environment variables, ``.env`` file);
``BusterConfig`` is the validated, immutable configuration of a single run,
built by :func:`build_config` from the settings plus CLI overrides.
"""

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buster.errors import ConfigError
from buster.utils.paths import compute_common_path_length, get_base_dir, get_relative_key

MaterializeMode = Literal["copy", "rename"]

MODE_COPY: MaterializeMode = "copy"
MODE_RENAME: MaterializeMode = "rename"

DEFAULT_EXTENSIONS = ("css", "js")
DEFAULT_HASH_LENGTH = 10
DEFAULT_OUT_FILE = "asset-manifest.json"


def default_max_workers() -> int:
    """Bound for concurrent filesystem operations during a walk."""
    return max(1, min(32, (os.cpu_count() or 1) * 2))


def _normalize_extensions(values: Any) -> list[str]:
    if isinstance(values, str):
        values = [values]
    normalized = []
    for value in values:
        value = str(value).strip()
        if value.startswith("."):
            value = value[1:]
        normalized.append(value)
    return normalized


class Settings(BaseSettings):
    """Buster default settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File extensions (without leading dot) to fingerprint",
    )

    hash_length: int = Field(
        default=DEFAULT_HASH_LENGTH,
        ge=1,
        description="Number of hex characters of the content hash kept in filenames",
    )

    mode: MaterializeMode = Field(
        default=MODE_COPY,
        description="Create hashed files by copying (copy) or moving (rename) originals",
    )

    out_file: Path = Field(
        default=Path(DEFAULT_OUT_FILE),
        description="Manifest output path",
    )

    max_workers: int = Field(
        default_factory=default_max_workers,
        ge=1,
        description="Maximum number of concurrent filesystem operations",
    )

    follow_symlinks: bool = Field(
        default=True,
        description="Treat symlinks as their targets (cycles are skipped)",
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def _strip_leading_dots(cls, value: Any) -> Any:
        if value is None:
            return value
        return _normalize_extensions(value)


class BusterConfig(BaseModel):
    """Validated configuration for one fingerprinting run.

    Instances are frozen: the walker shares one configuration across all
    concurrent tasks and threads the current path separately.
    """

    model_config = ConfigDict(frozen=True)

    input: Path = Field(..., description="Absolute path of the file or directory to process")
    base_dir: Path = Field(..., description="Directory manifest keys are relative to")
    extensions: frozenset[str] = Field(..., description="Extensions to fingerprint")
    hash_length: int = Field(DEFAULT_HASH_LENGTH, ge=1)
    mode: MaterializeMode = MODE_COPY
    out_file: Path = Field(..., description="Absolute path of the manifest file")
    max_workers: int = Field(default_factory=default_max_workers, ge=1)
    follow_symlinks: bool = True

    @model_validator(mode="before")
    @classmethod
    def _derive_base_dir(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("base_dir") is None and data.get("input"):
            data = dict(data)
            data["base_dir"] = get_base_dir(Path(data["input"]))
        return data

    @field_validator("extensions", mode="before")
    @classmethod
    def _validate_extensions(cls, value: Any) -> frozenset[str]:
        extensions = frozenset(_normalize_extensions(value))
        if not extensions:
            raise ValueError("at least one extension is required")
        return extensions

    @field_validator("input", "out_file")
    @classmethod
    def _require_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"{value} must be an absolute path")
        return value

    @property
    def common_path_length(self) -> int:
        """Legacy character offset between absolute paths and manifest keys."""
        return compute_common_path_length(self.input, is_dir=self.input == self.base_dir)

    def relative_key(self, path: Path) -> str:
        """Return the manifest key of an absolute ``path`` below the input root."""
        return get_relative_key(path, self.base_dir)


def build_config(
    input_path: Path | str | None,
    *,
    settings: Settings | None = None,
    extensions: list[str] | None = None,
    hash_length: int | None = None,
    mode: str | None = None,
    out_file: Path | str | None = None,
    max_workers: int | None = None,
    follow_symlinks: bool | None = None,
) -> BusterConfig:
    """Merge CLI overrides onto ``settings`` and validate the result.

    Raises:
        ConfigError: If the input is missing or does not exist, or any value
            fails validation.
    """
    if input_path is None or str(input_path) == "":
        raise ConfigError("Missing parameter input")

    settings = settings or get_settings()

    resolved_input = Path(input_path).expanduser().resolve()
    if not resolved_input.exists():
        raise ConfigError("Input path does not exist", path=resolved_input)
    if not (resolved_input.is_dir() or resolved_input.is_file()):
        raise ConfigError("Input must be a regular file or a directory", path=resolved_input)

    raw_out_file = out_file if out_file is not None else settings.out_file
    resolved_out_file = Path(raw_out_file).expanduser().resolve()

    try:
        return BusterConfig(
            input=resolved_input,
            base_dir=get_base_dir(resolved_input),
            extensions=extensions if extensions else settings.extensions,
            hash_length=hash_length if hash_length is not None else settings.hash_length,
            mode=mode if mode is not None else settings.mode,
            out_file=resolved_out_file,
            max_workers=max_workers if max_workers is not None else settings.max_workers,
            follow_symlinks=(
                follow_symlinks if follow_symlinks is not None else settings.follow_symlinks
            ),
        )
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"Invalid configuration ({details})") from exc


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
