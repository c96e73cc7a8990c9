"""Buster CLI application with Typer."""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError

from buster import __version__
from buster.bootstrap import bootstrap_application
from buster.config import Settings, build_config, get_settings
from buster.errors import BusterError, ConfigError
from buster.utils.log import configure_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_PROCESSING_ERROR = 10
EXIT_INTERNAL_ERROR = 70  # sysexits.h: internal software error
EXIT_CONFIG_ERROR = 78  # sysexits.h: configuration error
EXIT_SIGINT = 130  # terminated by Ctrl-C

app = typer.Typer(
    name="buster",
    help="Fingerprint static assets with their content hash and write a manifest",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"Buster version {__version__}")
        raise typer.Exit()


def exit_code_for(exc: BaseException) -> int:
    """Map a failure to the documented process exit code."""
    if isinstance(exc, KeyboardInterrupt):
        return EXIT_SIGINT
    if isinstance(exc, BusterError):
        return EXIT_PROCESSING_ERROR if exc.is_processing_error else EXIT_CONFIG_ERROR
    return EXIT_INTERNAL_ERROR


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid BUSTER_* environment settings: {exc}") from exc


def _fail(exc: BaseException, headline: str) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    logger.debug(headline, exc_info=exc)
    raise typer.Exit(code=exit_code_for(exc)) from exc


@app.command()
def main(
    input_path: Annotated[
        Path | None,
        typer.Argument(
            help="Directory (or single file) containing the assets",
            show_default=False,
        ),
    ] = None,
    extensions: Annotated[
        list[str] | None,
        typer.Option(
            "--extension",
            "-e",
            help="Extension to fingerprint, without dot (repeatable; default: css, js)",
        ),
    ] = None,
    hash_length: Annotated[
        int | None,
        typer.Option("--hash-length", "-l", help="Number of hash characters in filenames"),
    ] = None,
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help="copy (keep originals) or rename (move them)"),
    ] = None,
    out_file: Annotated[
        Path | None,
        typer.Option("--out-file", "-o", help="Manifest output file (default: asset-manifest.json)"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", help="Maximum concurrent filesystem operations"),
    ] = None,
    no_follow_symlinks: Annotated[
        bool,
        typer.Option("--no-follow-symlinks", help="Skip symlinks instead of following them"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Activate debug logging (wins over --quiet)"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only report errors"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Copy or rename matching files to name.<hash>.ext and write the manifest."""
    configure_logging(debug=debug, quiet=quiet)
    verbose = debug or not quiet

    try:
        settings = _load_settings()
        config = build_config(
            input_path,
            settings=settings,
            extensions=extensions or None,
            hash_length=hash_length,
            mode=mode,
            out_file=out_file,
            max_workers=workers,
            follow_symlinks=False if no_follow_symlinks else None,
        )
        container = bootstrap_application(settings)

        if verbose:
            typer.secho(f"Fingerprinting assets in {config.input}...", fg=typer.colors.BLUE)
        result = container.service.run(config)
    except KeyboardInterrupt as exc:
        logger.info("Caught interrupt signal (Ctrl-C). Exiting!")
        raise typer.Exit(code=EXIT_SIGINT) from exc
    except ConfigError as exc:
        _fail(exc, "Could not determine configuration for buster!")
    except BusterError as exc:
        _fail(exc, "Error during processing!")
    except Exception as exc:
        logger.exception("This was unexpected! Aborting!")
        _fail(exc, "This was unexpected! Aborting!")

    if verbose:
        typer.secho(
            f"✅ Fingerprinted {len(result.manifest)} files", fg=typer.colors.GREEN
        )
        for stage in result.stages:
            typer.echo(f"   [{stage.status}] {stage.name}: {stage.detail}")
        for note in result.notes:
            typer.echo(f"NOTE: {note}")
