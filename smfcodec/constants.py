"""Wire constants shared by the codec modules."""
from __future__ import annotations

from enum import IntEnum

HEADER_MAGIC = b"MThd"
TRACK_MAGIC = b"MTrk"
HEADER_LENGTH = 6

DEFAULT_FORMAT_TYPE = 1
DEFAULT_PPQ = 0x00F0

#: Fallback channel passed to meta events so their status byte becomes 0xFF.
META_CHANNEL = 0x0F


class Key(IntEnum):
    """Discriminant of a track entry: the status high nibble, or 0 for delta times."""

    VLV = 0x00
    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    AFTER_TOUCH = 0xA0
    CONTROLLER = 0xB0
    PATCH = 0xC0
    PRESSURE = 0xD0
    PITCH_BEND = 0xE0
    META = 0xF0


class ControllerType(IntEnum):
    """Common controller numbers for ``Controller`` events (partial list)."""

    BANK = 0x00
    MODULATION = 0x01
    BREATH = 0x02
    FOOT = 0x04
    PORTAMENTO = 0x05
    VOLUME = 0x07
    BALANCE = 0x08
    PAN = 0x0A


class MetaType(IntEnum):
    """Standard meta event type bytes."""

    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F
