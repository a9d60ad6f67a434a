"""smf info — print the header and a per-track summary of a MIDI file.

Usage
-----
::

    smf info song.mid           # human-readable table
    smf info song.mid --json    # machine-readable JSON
"""
from __future__ import annotations

import json
import logging
import pathlib

import typer

from smfcodec.cli._io import load_or_exit
from smfcodec.summary import MidiSummary, summarize_midi

logger = logging.getLogger(__name__)


def _print_summary_human(path: pathlib.Path, summary: MidiSummary) -> None:
    typer.echo(f"file    {path}")
    typer.echo(f"format  {summary.format_type}")
    typer.echo(f"ppq     {summary.ppq}")
    typer.echo(f"tracks  {summary.track_count}")
    if not summary.tracks:
        return
    typer.echo("")
    header = f"{'TRACK':<6}  {'EVENTS':>7}  {'TICKS':>9}  {'EOT':<3}  NAME"
    typer.echo(header)
    typer.echo("-" * len(header))
    for t in summary.tracks:
        eot = "yes" if t.terminated else "no"
        name = t.name if t.name is not None else "--"
        typer.echo(f"{t.index:<6}  {t.events:>7}  {t.total_ticks:>9}  {eot:<3}  {name}")


def run_info(*, path: pathlib.Path, as_json: bool, indent: int) -> MidiSummary:
    """Load *path* and print its summary; returns the summary for tests."""
    midi = load_or_exit(path)
    summary = summarize_midi(midi)
    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=indent))
    else:
        _print_summary_human(path, summary)
    logger.debug("✅ info %s: %d track(s)", path, summary.track_count)
    return summary
