"""smf dump — list every event of a MIDI file with absolute ticks.

Usage
-----
::

    smf dump song.mid                 # all tracks
    smf dump song.mid --track 1       # one track
    smf dump song.mid --json          # one JSON array of events
"""
from __future__ import annotations

import json
import logging
import pathlib

import typer

from smfcodec.cli._io import load_or_exit
from smfcodec.errors import ExitCode, OutOfRangeError
from smfcodec.summary import EventRow, event_rows

logger = logging.getLogger(__name__)


def _format_fields(event: dict[str, object]) -> str:
    skip = {"kind", "channel"}
    return " ".join(f"{k}={v}" for k, v in event.items() if k not in skip and v is not None)


def _print_rows_human(rows: list[EventRow]) -> None:
    if not rows:
        typer.echo("No events.")
        return
    header = f"{'TRACK':<6}  {'TICK':>9}  {'DELTA':>7}  {'KIND':<12}  {'CH':>2}  FIELDS"
    typer.echo(header)
    typer.echo("-" * len(header))
    for row in rows:
        channel = row.event.get("channel")
        ch_col = str(channel) if channel is not None else "--"
        typer.echo(
            f"{row.track:<6}  {row.tick:>9}  {row.delta:>7}  "
            f"{row.event['kind']:<12}  {ch_col:>2}  {_format_fields(row.event)}"
        )


def run_dump(
    *,
    path: pathlib.Path,
    track: int | None,
    as_json: bool,
    indent: int,
) -> list[EventRow]:
    """Load *path* and print its events; returns the rows for tests."""
    midi = load_or_exit(path)
    try:
        rows = event_rows(midi, track)
    except OutOfRangeError as exc:
        typer.echo(f"❌ {exc}")
        raise typer.Exit(code=ExitCode.USER_ERROR)

    if as_json:
        payload = [
            {"track": r.track, "tick": r.tick, "delta": r.delta, **r.event} for r in rows
        ]
        typer.echo(json.dumps(payload, indent=indent))
    else:
        _print_rows_human(rows)
    logger.debug("✅ dump %s: %d event(s)", path, len(rows))
    return rows
