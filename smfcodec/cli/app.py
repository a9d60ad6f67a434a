"""smf — Typer application root.

Entry point for the ``smf`` console script.  Subcommands are registered as
plain ``@cli.command()`` functions rather than Typer sub-applications: Click
groups parse their own options with ``allow_interspersed_args=False``, which
would reject ``smf dump FILE --json`` with the flag after the positional
argument.

The root callback reads :class:`~smfcodec.config.SmfSettings` once,
configures logging from ``SMF_LOG_LEVEL`` (``--verbose`` forces DEBUG) and
hands the settings to subcommands through ``ctx.obj``.
"""
from __future__ import annotations

import logging
import pathlib
from typing import Optional

import pydantic
import typer

from smfcodec.cli.commands.copy import run_copy
from smfcodec.cli.commands.dump import run_dump
from smfcodec.cli.commands.info import run_info
from smfcodec.cli.commands.new import run_new
from smfcodec.config import SmfSettings, get_settings
from smfcodec.errors import ExitCode

cli = typer.Typer(
    name="smf",
    help="smf — inspect, validate and rewrite Standard MIDI Files.",
    no_args_is_help=True,
)


def _settings(ctx: typer.Context) -> SmfSettings:
    settings: SmfSettings = ctx.obj
    return settings


@cli.callback()
def _root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    try:
        settings = get_settings()
    except pydantic.ValidationError as exc:
        typer.echo(f"❌ Invalid SMF_* environment settings: {exc}")
        raise typer.Exit(code=ExitCode.USER_ERROR)

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = settings


@cli.command("info", help="Show the header and a per-track summary.")
def _info_cmd(
    ctx: typer.Context,
    path: pathlib.Path = typer.Argument(..., help="MIDI file to inspect."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    run_info(path=path, as_json=as_json, indent=_settings(ctx).json_indent)


@cli.command("dump", help="List events with absolute tick positions.")
def _dump_cmd(
    ctx: typer.Context,
    path: pathlib.Path = typer.Argument(..., help="MIDI file to dump."),
    track: Optional[int] = typer.Option(
        None, "--track", "-t", help="Only dump this track (zero-based)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
) -> None:
    run_dump(path=path, track=track, as_json=as_json, indent=_settings(ctx).json_indent)


@cli.command("copy", help="Parse a MIDI file and write it back out.")
def _copy_cmd(
    source: pathlib.Path = typer.Argument(..., help="MIDI file to read."),
    destination: pathlib.Path = typer.Argument(..., help="Where to write the copy."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite DESTINATION."),
) -> None:
    run_copy(source=source, destination=destination, force=force)


@cli.command("new", help="Write an empty multi-track MIDI file.")
def _new_cmd(
    ctx: typer.Context,
    destination: pathlib.Path = typer.Argument(..., help="File to create."),
    ppq: Optional[int] = typer.Option(
        None, "--ppq", help="Pulses per quarter note (default: SMF_DEFAULT_PPQ)."
    ),
    tracks: int = typer.Option(1, "--tracks", help="Number of tracks to create."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite DESTINATION."),
) -> None:
    resolved_ppq = ppq if ppq is not None else _settings(ctx).default_ppq
    run_new(destination=destination, ppq=resolved_ppq, tracks=tracks, force=force)


if __name__ == "__main__":
    cli()
