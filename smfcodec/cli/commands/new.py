"""smf new — write a skeleton multi-track MIDI file.

Each track holds only its end-of-track event, so the result is the smallest
valid format-1 file with the requested resolution and track count.
"""
from __future__ import annotations

import logging
import pathlib

import typer

from smfcodec.cli._io import write_or_exit
from smfcodec.errors import ExitCode
from smfcodec.midi import Midi

logger = logging.getLogger(__name__)

_MAX_TRACKS = 0xFFFF


def build_skeleton(ppq: int, tracks: int) -> Midi:
    midi = Midi(ppq=ppq)
    for _ in range(tracks):
        midi.add_track().end_of_track()
    return midi


def run_new(*, destination: pathlib.Path, ppq: int, tracks: int, force: bool) -> Midi:
    """Write a skeleton file to *destination*; returns the written ``Midi``."""
    if destination.exists() and not force:
        typer.echo(f"❌ {destination} already exists (use --force to overwrite)")
        raise typer.Exit(code=ExitCode.USER_ERROR)
    if not 1 <= ppq <= 0x7FFF:
        typer.echo(f"❌ PPQ must be between 1 and {0x7FFF} (got {ppq})")
        raise typer.Exit(code=ExitCode.USER_ERROR)
    if not 0 <= tracks <= _MAX_TRACKS:
        typer.echo(f"❌ Track count must be between 0 and {_MAX_TRACKS} (got {tracks})")
        raise typer.Exit(code=ExitCode.USER_ERROR)

    midi = build_skeleton(ppq, tracks)
    logger.debug("✅ Built skeleton: %d track(s), PPQ %d", tracks, ppq)
    written = write_or_exit(midi, destination)
    typer.echo(f"✅ Created {destination} ({tracks} track(s), PPQ {ppq}, {written} bytes)")
    return midi
