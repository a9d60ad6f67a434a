"""Read-only views of a parsed file for the ``smf`` command line.

Provides:

- ``summarize_midi`` — pure function: ``Midi`` → ``MidiSummary``.
- ``event_rows`` — flatten tracks into ``EventRow`` records with absolute
  tick positions.
- ``MidiSummary`` / ``TrackSummary`` / ``EventRow`` — named result types.

Pure data — no I/O, no typer, no side effects.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from smfcodec.constants import MetaType
from smfcodec.messages import Meta
from smfcodec.midi import Midi
from smfcodec.track import Track


@dataclass(frozen=True)
class TrackSummary:
    """Counts and markers for a single track."""

    index: int
    name: str | None
    entries: int
    events: int
    has_channel_events: bool
    total_ticks: int
    terminated: bool
    """True when the last entry is the end-of-track meta event."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "entries": self.entries,
            "events": self.events,
            "has_channel_events": self.has_channel_events,
            "total_ticks": self.total_ticks,
            "terminated": self.terminated,
        }


@dataclass(frozen=True)
class MidiSummary:
    """Header fields and per-track summaries of one file."""

    format_type: int
    ppq: int
    tracks: list[TrackSummary] = field(default_factory=list)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "format_type": self.format_type,
            "ppq": self.ppq,
            "track_count": self.track_count,
            "tracks": [t.to_dict() for t in self.tracks],
        }


@dataclass(frozen=True)
class EventRow:
    """One event with its track, absolute tick and delta."""

    track: int
    tick: int
    delta: int
    event: dict[str, Any]


def _track_name(track: Track) -> str | None:
    for _, event in track.events():
        if isinstance(event, Meta) and event.meta_type == MetaType.TRACK_NAME:
            return event.text_value
    return None


def summarize_track(index: int, track: Track) -> TrackSummary:
    total_ticks = sum(delta for delta, _ in track.events())
    last = track.messages[-1] if len(track) else None
    return TrackSummary(
        index=index,
        name=_track_name(track),
        entries=len(track),
        events=track.event_count,
        has_channel_events=track.check_non_meta_messages(),
        total_ticks=total_ticks,
        terminated=isinstance(last, Meta) and last.is_end_of_track,
    )


def summarize_midi(midi: Midi) -> MidiSummary:
    return MidiSummary(
        format_type=midi.format_type,
        ppq=midi.ppq,
        tracks=[summarize_track(i, t) for i, t in enumerate(midi.tracks)],
    )


def event_rows(midi: Midi, track_index: int | None = None) -> list[EventRow]:
    """Return every event (or one track's events) in file order.

    Raises:
        OutOfRangeError: When *track_index* names a track that does not exist.
    """
    if track_index is not None:
        selected = [(track_index, midi.get_track(track_index))]
    else:
        selected = list(enumerate(midi.tracks))

    rows: list[EventRow] = []
    for index, track in selected:
        tick = 0
        for delta, event in track.events():
            tick += delta
            rows.append(EventRow(track=index, tick=tick, delta=delta, event=event.to_dict()))
    return rows
