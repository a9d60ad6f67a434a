"""Standard MIDI File reading and writing."""
from __future__ import annotations

from smfcodec.constants import ControllerType, Key, MetaType
from smfcodec.errors import (
    FormatError,
    OutOfRangeError,
    SmfError,
    UnsupportedMessageError,
    ValidationError,
)
from smfcodec.messages import (
    AfterTouch,
    Controller,
    Event,
    Message,
    Meta,
    NoteOff,
    NoteOn,
    Patch,
    PitchBend,
    Pressure,
)
from smfcodec.midi import Midi
from smfcodec.track import Track, TrackCursor
from smfcodec.vlv import VLV

__all__ = [
    "Midi",
    "Track",
    "TrackCursor",
    "VLV",
    "Message",
    "Event",
    "NoteOff",
    "NoteOn",
    "AfterTouch",
    "Controller",
    "Patch",
    "Pressure",
    "PitchBend",
    "Meta",
    "Key",
    "ControllerType",
    "MetaType",
    "SmfError",
    "FormatError",
    "UnsupportedMessageError",
    "ValidationError",
    "OutOfRangeError",
]
