"""CLI interface for the meditation media pipeline."""

import json
import logging
from pathlib import Path
from uuid import uuid4

import typer

from .domain.errors import MediaPipelineError
from .interfaces.cli_handlers import (
    inspect_mp3,
    presign_upload,
    promote_audio_key,
    promote_image_key,
)

app = typer.Typer(help="Meditation media upload pipeline")


@app.callback()
def configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level name."),
) -> None:
    """Configure logging before running a command."""

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _emit(payload: dict[str, object]) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def _fail(error: MediaPipelineError, correlation_id: str) -> None:
    typer.echo(f"[FAILED] code={error.code} message={error.message} correlation_id={correlation_id}", err=True)
    raise typer.Exit(code=1)


@app.command("presign")
def presign_command() -> None:
    """Issue a presigned upload URL for a fresh staging key."""

    correlation_id = str(uuid4())
    try:
        _emit(presign_upload(correlation_id))
    except MediaPipelineError as error:
        _fail(error, correlation_id)


@app.command("promote-audio")
def promote_audio_command(
    upload_key: str = typer.Argument(..., help="Staging key returned by presign."),
    audio_id: str | None = typer.Option(
        None,
        "--id",
        help="Identifier used for the destination key; a new UUID when omitted.",
    ),
) -> None:
    """Validate a staged MP3 and promote it to '<id>.mp3'."""

    correlation_id = str(uuid4())
    try:
        _emit(promote_audio_key(upload_key, audio_id or str(uuid4()), correlation_id))
    except MediaPipelineError as error:
        _fail(error, correlation_id)


@app.command("promote-image")
def promote_image_command(
    upload_key: str = typer.Argument(..., help="Staging key returned by presign."),
    destination: str = typer.Argument(..., help="Destination key without extension, e.g. photo/user123."),
) -> None:
    """Validate a staged image and promote it under DESTINATION plus its extension."""

    correlation_id = str(uuid4())
    try:
        _emit(promote_image_key(upload_key, destination, correlation_id))
    except MediaPipelineError as error:
        _fail(error, correlation_id)


@app.command("inspect-mp3")
def inspect_mp3_command(
    path: Path = typer.Argument(..., help="Local MP3 file to decode."),
) -> None:
    """Report the decoded duration of a local MP3 and whether it would be accepted."""

    report = inspect_mp3(path)
    _emit(report)
    if not report["accepted"]:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
