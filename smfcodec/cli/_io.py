"""Shared file handling for ``smf`` subcommands.

Every command loads its input through :func:`load_or_exit` so a missing
file or malformed MIDI data turns into a one-line ``❌`` message and the
matching :class:`~smfcodec.errors.ExitCode` instead of a traceback.
"""
from __future__ import annotations

import logging
import pathlib

import typer

from smfcodec.errors import ExitCode, SmfError
from smfcodec.midi import Midi

logger = logging.getLogger(__name__)


def load_or_exit(path: pathlib.Path) -> Midi:
    """Parse *path*, exiting with a CLI error code on failure."""
    if not path.is_file():
        typer.echo(f"❌ File not found: {path}")
        raise typer.Exit(code=ExitCode.USER_ERROR)
    try:
        return Midi.load(path)
    except SmfError as exc:
        logger.debug("❌ Failed to parse %s", path, exc_info=True)
        typer.echo(f"❌ {path}: {exc}")
        raise typer.Exit(code=exc.exit_code)
    except OSError as exc:
        typer.echo(f"❌ Cannot read {path}: {exc}")
        raise typer.Exit(code=ExitCode.USER_ERROR)


def write_or_exit(midi: Midi, path: pathlib.Path) -> int:
    """Serialize *midi* to *path* and return the byte count written."""
    try:
        data = midi.to_bytes()
    except SmfError as exc:
        typer.echo(f"❌ Cannot serialize: {exc}")
        raise typer.Exit(code=exc.exit_code)
    try:
        path.write_bytes(data)
    except OSError as exc:
        typer.echo(f"❌ Cannot write {path}: {exc}")
        raise typer.Exit(code=ExitCode.USER_ERROR)
    return len(data)
