"""Pytest configuration and fixtures."""
from __future__ import annotations

import pathlib

import pytest

from smfcodec import Meta, Midi, NoteOff, NoteOn, Patch, Track


def build_scenario_midi() -> Midi:
    """One-track file: patch, note-on, note-off a quarter later, end-of-track.

    PPQ is 480 so the note-off delta is exactly one quarter note.
    """
    midi = Midi(ppq=480)
    track = midi.add_track()
    track.add_message(Patch(0), 0)
    track.add_message(NoteOn(60, 100), 0)
    track.add_message(NoteOff(60, 100), 480)
    track.add_message(Meta.end_of_track(), 0)
    return midi


@pytest.fixture
def scenario_midi() -> Midi:
    return build_scenario_midi()


@pytest.fixture
def scenario_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """The scenario file written to disk."""
    path = tmp_path / "scenario.mid"
    build_scenario_midi().write(path)
    return path


@pytest.fixture
def terminated_track() -> Track:
    track = Track()
    track.add_message(NoteOn(64, 90))
    track.add_message(NoteOff(64, 0), 240)
    track.end_of_track()
    return track
