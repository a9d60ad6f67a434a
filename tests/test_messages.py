"""Tests for the event variants: wire layouts, channel resolution, accessors."""
from __future__ import annotations

import dataclasses
import io

import pytest

from smfcodec.constants import ControllerType, Key, MetaType
from smfcodec.errors import UnsupportedMessageError, ValidationError
from smfcodec.messages import (
    AfterTouch,
    Controller,
    Event,
    Meta,
    NoteOff,
    NoteOn,
    Patch,
    PitchBend,
    Pressure,
    read_event,
)
from smfcodec.stream import BigEndianReader, BigEndianWriter


def _write(event: Event, fallback_channel: int) -> bytes:
    buffer = io.BytesIO()
    event.write(BigEndianWriter(buffer), fallback_channel)
    return buffer.getvalue()


def _reparse(raw: bytes) -> Event:
    reader = BigEndianReader.from_bytes(raw)
    return read_event(reader, reader.read_byte())


# ---------------------------------------------------------------------------
# Wire layouts
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("event", "expected"),
    [
        (NoteOff(60, 64, channel=1), "813c40"),
        (NoteOn(60, 100, channel=3), "933c64"),
        (AfterTouch(60, 20, channel=4), "a43c14"),
        (Controller(ControllerType.VOLUME, 127, channel=5), "b5077f"),
        (Patch(42, channel=6), "c62a"),
        (Pressure(33, channel=7), "d721"),
        (PitchBend(0x00, 0x40, channel=15), "ef0040"),
    ],
)
def test_channel_event_wire_layout(event: Event, expected: str) -> None:
    """Explicit channels go into the status low nibble regardless of fallback."""
    assert _write(event, fallback_channel=9) == bytes.fromhex(expected)


def test_unset_channel_uses_fallback() -> None:
    assert _write(NoteOn(60, 100), fallback_channel=5) == b"\x95\x3c\x64"
    assert _write(Patch(1), fallback_channel=0) == b"\xc0\x01"


def test_unset_channel_with_unusable_fallback_raises() -> None:
    with pytest.raises(ValidationError):
        _write(NoteOn(60, 100), fallback_channel=16)


def test_meta_status_comes_from_fallback_only() -> None:
    """Meta ignores its own channel; the track passes 0x0F to produce 0xFF."""
    assert _write(Meta(MetaType.END_OF_TRACK), 0x0F) == b"\xff\x2f\x00"
    assert _write(Meta(MetaType.END_OF_TRACK, channel=3), 0x0F) == b"\xff\x2f\x00"


def test_meta_wire_layout_with_payload() -> None:
    assert _write(Meta.tempo(500_000), 0x0F) == b"\xff\x51\x03\x07\xa1\x20"


# ---------------------------------------------------------------------------
# Write → read
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "event",
    [
        NoteOff(0, 0, channel=0),
        NoteOn(127, 1, channel=9),
        AfterTouch(61, 99, channel=2),
        Controller(ControllerType.PAN, 64, channel=11),
        Controller(0x40, 127, channel=0),
        Patch(127, channel=14),
        Pressure(0, channel=15),
        PitchBend(0x7F, 0x7F, channel=8),
        Meta(MetaType.TRACK_NAME, b"Lead"),
        Meta(0x7F, bytes(range(255))),
    ],
)
def test_event_survives_write_and_read(event: Event) -> None:
    parsed = _reparse(_write(event, 0x0F))
    assert parsed == event
    assert parsed.key == event.key


def test_parsed_event_takes_channel_from_status() -> None:
    parsed = _reparse(b"\x9a\x3c\x64")
    assert isinstance(parsed, NoteOn)
    assert parsed.channel == 10


@pytest.mark.parametrize("status", [0x00, 0x3C, 0x7F])
def test_data_byte_status_is_rejected(status: int) -> None:
    with pytest.raises(UnsupportedMessageError) as exc_info:
        read_event(BigEndianReader.from_bytes(b"\x00\x00"), status)
    assert exc_info.value.status == status


@pytest.mark.parametrize("status", [0xF0, 0xF7, 0xFE, 0xFF])
def test_any_system_status_reads_as_meta(status: int) -> None:
    """Every 0xFn status decodes as type, one-byte length, data."""
    reader = BigEndianReader.from_bytes(b"\x01\x02hi")
    parsed = read_event(reader, status)
    assert parsed == Meta(MetaType.TEXT, b"hi")
    assert reader.tell() == 4


def test_system_status_meta_is_written_as_ff() -> None:
    parsed = read_event(BigEndianReader.from_bytes(b"\x2f\x00"), 0xF7)
    assert _write(parsed, 0x0F) == b"\xff\x2f\x00"


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def test_channel_event_parameters() -> None:
    note = NoteOn(60, 100)
    assert note.key is Key.NOTE_ON
    assert note.channel is None
    assert note.parameter(0) == 60
    assert note.parameter(1) == 100
    assert note.parameter(2) is None
    assert note.parameter(-1) is None
    assert note.parameter_as_int(1) == 100
    assert note.parameter_as_int(7) == 0


def test_controller_parameter_is_typed() -> None:
    cc = Controller(0x0A, 64)
    assert cc.controller is ControllerType.PAN
    assert cc.parameter(0) is ControllerType.PAN
    assert cc.parameter_as_int(0) == 0x0A


def test_unknown_controller_number_stays_int() -> None:
    cc = Controller(0x40, 127)
    assert type(cc.controller) is int
    assert cc.controller == 0x40


def test_meta_parameters() -> None:
    meta = Meta(MetaType.TEXT, b"hello")
    assert meta.key is Key.META
    assert meta.parameter(0) == MetaType.TEXT
    assert meta.parameter(1) == 5
    assert meta.parameter(2) == b"hello"
    assert meta.parameter(3) is None
    assert meta.parameter_as_int(1) == 5
    assert meta.parameter_as_int(2) == 0


def test_pitch_bend_value_combines_bytes() -> None:
    assert PitchBend(0x00, 0x40).value == 0x2000
    assert PitchBend(0x7F, 0x7F).value == 0x3FFF


def test_events_are_immutable() -> None:
    note = NoteOn(60, 100)
    with pytest.raises(dataclasses.FrozenInstanceError):
        note.velocity = 0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("channel", [-1, 16, 0xFF])
def test_channel_out_of_range(channel: int) -> None:
    with pytest.raises(ValidationError):
        NoteOn(60, 100, channel=channel)


@pytest.mark.parametrize("value", [-1, 256])
def test_data_byte_out_of_range(value: int) -> None:
    with pytest.raises(ValidationError):
        NoteOff(value, 0)


def test_meta_payload_limit() -> None:
    assert Meta(0x01, b"x" * 255).length == 255
    with pytest.raises(ValidationError):
        Meta(0x01, b"x" * 256)


# ---------------------------------------------------------------------------
# Meta helpers
# ---------------------------------------------------------------------------


def test_meta_tempo_helper() -> None:
    tempo = Meta.tempo(500_000)
    assert tempo.meta_type == MetaType.SET_TEMPO
    assert tempo.data == b"\x07\xa1\x20"
    assert tempo.tempo_value == 500_000


@pytest.mark.parametrize("uspq", [0, 0x1000000])
def test_meta_tempo_out_of_range(uspq: int) -> None:
    with pytest.raises(ValidationError):
        Meta.tempo(uspq)


def test_meta_from_int_tempo_uses_three_bytes() -> None:
    assert Meta.from_int(MetaType.SET_TEMPO, 500_000) == Meta.tempo(500_000)


def test_meta_from_int_other_types_use_four_little_endian_bytes() -> None:
    meta = Meta.from_int(MetaType.SEQUENCE_NUMBER, 0x01020304)
    assert meta.data == b"\x04\x03\x02\x01"
    assert meta.length == 4
    assert _write(meta, 0x0F) == b"\xff\x00\x04\x04\x03\x02\x01"


@pytest.mark.parametrize("value", [-1, 1 << 32])
def test_meta_from_int_out_of_range(value: int) -> None:
    with pytest.raises(ValidationError):
        Meta.from_int(MetaType.SEQUENCE_NUMBER, value)


def test_tempo_value_is_none_for_other_meta() -> None:
    assert Meta(MetaType.TEXT, b"abc").tempo_value is None


def test_meta_text_helper() -> None:
    name = Meta.text(MetaType.TRACK_NAME, "Piano")
    assert name.data == b"Piano"
    assert name.text_value == "Piano"


def test_meta_text_must_be_latin1() -> None:
    with pytest.raises(ValidationError):
        Meta.text(MetaType.LYRIC, "♪")


def test_end_of_track_helper() -> None:
    eot = Meta.end_of_track()
    assert eot.is_end_of_track
    assert eot.data == b""
    assert not Meta(MetaType.TEXT).is_end_of_track


def test_to_dict_shapes() -> None:
    assert NoteOn(60, 100, channel=2).to_dict() == {
        "kind": "note_on",
        "channel": 2,
        "note": 60,
        "velocity": 100,
    }
    assert Meta.tempo(500_000).to_dict() == {
        "kind": "meta",
        "meta_type": 0x51,
        "name": "set_tempo",
        "data": "07a120",
    }
