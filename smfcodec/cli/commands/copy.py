"""smf copy — parse a MIDI file and write it back out.

Re-serializing recomputes every chunk length and normalises delta-time
encodings, so ``copy`` doubles as a validity check: it fails exactly where
the parser or writer would.
"""
from __future__ import annotations

import logging
import pathlib

import typer

from smfcodec.cli._io import load_or_exit, write_or_exit
from smfcodec.errors import ExitCode

logger = logging.getLogger(__name__)


def run_copy(*, source: pathlib.Path, destination: pathlib.Path, force: bool) -> int:
    """Copy *source* to *destination* through the codec; returns bytes written."""
    if destination.exists() and not force:
        typer.echo(f"❌ {destination} already exists (use --force to overwrite)")
        raise typer.Exit(code=ExitCode.USER_ERROR)

    midi = load_or_exit(source)
    written = write_or_exit(midi, destination)
    typer.echo(f"✅ Wrote {destination} ({midi.track_count} track(s), {written} bytes)")
    logger.info("✅ Copied %s → %s (%d bytes)", source, destination, written)
    return written
