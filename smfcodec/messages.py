"""The closed set of track events and their wire layouts.

Provides:

- One frozen dataclass per event kind: ``NoteOff``, ``NoteOn``,
  ``AfterTouch``, ``Controller``, ``Patch``, ``Pressure``, ``PitchBend``
  and ``Meta``.  Fields are named and typed; the ``Event`` alias is their
  union and ``Message`` adds the ``VLV`` delta-time entry.
- ``read_event`` — decode one event given its already-consumed status byte.

Channel resolution
------------------
``channel=None`` means "not set": the event takes the fallback channel
handed to ``write`` by the owning track (the track's index in the file).
The fallback is applied only at serialization time, so the same event
object written into two tracks gets two different status bytes.

Meta events always get fallback ``0x0F`` from the track writer, which
turns ``Key.META`` (0xF0) into the 0xFF meta status.

Wire layouts (after the status byte)::

    NoteOff     note, velocity          0x8n
    NoteOn      note, velocity          0x9n
    AfterTouch  note, touch             0xAn
    Controller  controller, value       0xBn
    Patch       instrument              0xCn
    Pressure    pressure                0xDn
    PitchBend   lsb, msb                0xEn
    Meta        type, length, data      0xFn (written as 0xFF)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from smfcodec.constants import ControllerType, Key, MetaType
from smfcodec.errors import UnsupportedMessageError, ValidationError
from smfcodec.stream import BigEndianReader, BigEndianWriter
from smfcodec.vlv import VLV

logger = logging.getLogger(__name__)

MAX_META_LENGTH = 0xFF
MAX_TEMPO = 0xFFFFFF


def _check_channel(channel: int | None) -> None:
    if channel is not None and not 0 <= channel <= 0x0F:
        raise ValidationError(f"MIDI channel must be 0–15 (got {channel})")


def _check_byte(name: str, value: int) -> None:
    if not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise ValidationError(f"{name} must be a byte value 0–255 (got {value!r})")


class _ChannelEvent:
    """Shared behaviour of the seven channel-voice events.

    Subclasses are frozen dataclasses that declare their payload fields in
    wire order and list them in ``_FIELDS``.
    """

    key: ClassVar[Key]
    kind: ClassVar[str]
    _FIELDS: ClassVar[tuple[str, ...]]

    channel: int | None

    def __post_init__(self) -> None:
        _check_channel(self.channel)
        for name in self._FIELDS:
            _check_byte(name, getattr(self, name))

    @property
    def parameters(self) -> tuple[Any, ...]:
        """Payload values in wire order."""
        return tuple(getattr(self, name) for name in self._FIELDS)

    def parameter(self, index: int) -> Any:
        """Payload value at *index*, or ``None`` past the event's arity."""
        params = self.parameters
        if 0 <= index < len(params):
            return params[index]
        return None

    def parameter_as_int(self, index: int) -> int:
        """Payload value at *index* as an int; 0 when absent.  Never raises."""
        value = self.parameter(index)
        return int(value) if isinstance(value, int) else 0

    def resolve_channel(self, fallback_channel: int) -> int:
        channel = self.channel if self.channel is not None else fallback_channel
        if not 0 <= channel <= 0x0F:
            raise ValidationError(
                f"{type(self).__name__} has no channel set and fallback channel "
                f"{channel} does not fit in a status nibble"
            )
        return channel

    def write(self, writer: BigEndianWriter, fallback_channel: int) -> None:
        writer.write_byte(self.key | self.resolve_channel(fallback_channel))
        for value in self.parameters:
            writer.write_byte(int(value))

    @classmethod
    def read(cls, reader: BigEndianReader, channel: int) -> Any:
        values = [reader.read_byte() for _ in cls._FIELDS]
        return cls(*values, channel=channel)  # type: ignore[call-arg]

    def to_dict(self) -> dict[str, Any]:
        fields: dict[str, Any] = {name: int(getattr(self, name)) for name in self._FIELDS}
        return {"kind": self.kind, "channel": self.channel, **fields}


@dataclass(frozen=True)
class NoteOff(_ChannelEvent):
    note: int
    velocity: int
    channel: int | None = None

    key: ClassVar[Key] = Key.NOTE_OFF
    kind: ClassVar[str] = "note_off"
    _FIELDS: ClassVar[tuple[str, ...]] = ("note", "velocity")


@dataclass(frozen=True)
class NoteOn(_ChannelEvent):
    note: int
    velocity: int
    channel: int | None = None

    key: ClassVar[Key] = Key.NOTE_ON
    kind: ClassVar[str] = "note_on"
    _FIELDS: ClassVar[tuple[str, ...]] = ("note", "velocity")


@dataclass(frozen=True)
class AfterTouch(_ChannelEvent):
    """Polyphonic key pressure on a single note."""

    note: int
    touch: int
    channel: int | None = None

    key: ClassVar[Key] = Key.AFTER_TOUCH
    kind: ClassVar[str] = "after_touch"
    _FIELDS: ClassVar[tuple[str, ...]] = ("note", "touch")


@dataclass(frozen=True)
class Controller(_ChannelEvent):
    """Control change.

    ``controller`` is a :class:`ControllerType` when the number is one of the
    known controllers, otherwise the plain controller number.
    """

    controller: ControllerType | int
    value: int
    channel: int | None = None

    key: ClassVar[Key] = Key.CONTROLLER
    kind: ClassVar[str] = "controller"
    _FIELDS: ClassVar[tuple[str, ...]] = ("controller", "value")

    def __post_init__(self) -> None:
        super().__post_init__()
        try:
            known = ControllerType(self.controller)
        except ValueError:
            return
        object.__setattr__(self, "controller", known)


@dataclass(frozen=True)
class Patch(_ChannelEvent):
    """Program change."""

    instrument: int
    channel: int | None = None

    key: ClassVar[Key] = Key.PATCH
    kind: ClassVar[str] = "patch"
    _FIELDS: ClassVar[tuple[str, ...]] = ("instrument",)


@dataclass(frozen=True)
class Pressure(_ChannelEvent):
    """Channel pressure."""

    pressure: int
    channel: int | None = None

    key: ClassVar[Key] = Key.PRESSURE
    kind: ClassVar[str] = "pressure"
    _FIELDS: ClassVar[tuple[str, ...]] = ("pressure",)


@dataclass(frozen=True)
class PitchBend(_ChannelEvent):
    lsb: int
    msb: int
    channel: int | None = None

    key: ClassVar[Key] = Key.PITCH_BEND
    kind: ClassVar[str] = "pitch_bend"
    _FIELDS: ClassVar[tuple[str, ...]] = ("lsb", "msb")

    @property
    def value(self) -> int:
        """Combined 14-bit bend amount; 0x2000 is centre."""
        return ((self.msb & 0x7F) << 7) | (self.lsb & 0x7F)


@dataclass(frozen=True)
class Meta:
    """A meta event: type byte plus a payload of at most 255 bytes.

    The length is written as a single byte, matching the 0–255 payload
    bound enforced at construction.
    """

    meta_type: int
    data: bytes = b""
    channel: int | None = None

    key: ClassVar[Key] = Key.META
    kind: ClassVar[str] = "meta"

    def __post_init__(self) -> None:
        _check_byte("meta_type", self.meta_type)
        _check_channel(self.channel)
        data = bytes(self.data)
        if len(data) > MAX_META_LENGTH:
            raise ValidationError(
                f"Meta payload is {len(data)} bytes; at most {MAX_META_LENGTH} fit"
            )
        object.__setattr__(self, "data", data)

    @classmethod
    def text(cls, meta_type: int, text: str) -> Meta:
        """Build a text-style meta event (track name, lyric, marker, …)."""
        try:
            data = text.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise ValidationError(f"Meta text is not latin-1 encodable: {text!r}") from exc
        return cls(meta_type, data)

    @classmethod
    def tempo(cls, microseconds_per_quarter: int) -> Meta:
        """Build a Set Tempo event (``FF 51 03 tt tt tt``)."""
        if not 0 < microseconds_per_quarter <= MAX_TEMPO:
            raise ValidationError(
                f"Tempo must be 1..{MAX_TEMPO} µs per quarter note "
                f"(got {microseconds_per_quarter})"
            )
        return cls(MetaType.SET_TEMPO, microseconds_per_quarter.to_bytes(3, "big"))

    @classmethod
    def from_int(cls, meta_type: int, value: int) -> Meta:
        """Build a meta event from an integer payload.

        Set Tempo gets its 3-byte big-endian form; any other type stores
        *value* as 4 little-endian bytes.
        """
        if meta_type == MetaType.SET_TEMPO:
            return cls.tempo(value)
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValidationError(f"Meta integer payload must fit in 32 bits (got {value})")
        return cls(meta_type, value.to_bytes(4, "little"))

    @classmethod
    def end_of_track(cls) -> Meta:
        return cls(MetaType.END_OF_TRACK)

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def is_end_of_track(self) -> bool:
        return self.meta_type == MetaType.END_OF_TRACK

    @property
    def tempo_value(self) -> int | None:
        """Microseconds per quarter note for a Set Tempo event, else ``None``."""
        if self.meta_type != MetaType.SET_TEMPO or len(self.data) != 3:
            return None
        return int.from_bytes(self.data, "big")

    @property
    def text_value(self) -> str:
        return self.data.decode("latin-1")

    def parameter(self, index: int) -> Any:
        """``(meta_type, length, data)`` by index; ``None`` past index 2."""
        if index == 0:
            return self.meta_type
        if index == 1:
            return self.length
        if index == 2:
            return self.data
        return None

    def parameter_as_int(self, index: int) -> int:
        value = self.parameter(index)
        return int(value) if isinstance(value, int) else 0

    def write(self, writer: BigEndianWriter, fallback_channel: int) -> None:
        writer.write_byte(self.key | fallback_channel)
        writer.write_byte(self.meta_type)
        writer.write_byte(len(self.data))
        writer.write_bytes(self.data)

    @classmethod
    def read(cls, reader: BigEndianReader) -> Meta:
        meta_type = reader.read_byte()
        length = reader.read_byte()
        return cls(meta_type, reader.read_bytes(length))

    def to_dict(self) -> dict[str, Any]:
        try:
            name: str | None = MetaType(self.meta_type).name.lower()
        except ValueError:
            name = None
        return {
            "kind": self.kind,
            "meta_type": self.meta_type,
            "name": name,
            "data": self.data.hex(),
        }


Event = Union[NoteOff, NoteOn, AfterTouch, Controller, Patch, Pressure, PitchBend, Meta]
Message = Union[Event, VLV]

_CHANNEL_EVENTS: dict[int, type[_ChannelEvent]] = {
    cls.key: cls
    for cls in (NoteOff, NoteOn, AfterTouch, Controller, Patch, Pressure, PitchBend)
}


def read_event(reader: BigEndianReader, status: int, offset: int | None = None) -> Event:
    """Decode the event whose status byte has just been read.

    Channel events take their channel from the status low nibble.  Any
    0xFn status introduces a meta event; data bytes in status position
    (running status) are rejected.
    *offset* is only used to locate the status byte in error messages.

    Raises:
        UnsupportedMessageError: When *status* is not a recognised event.
    """
    if status & 0xF0 == Key.META:
        return Meta.read(reader)
    event_cls = _CHANNEL_EVENTS.get(status & 0xF0)
    if event_cls is None:
        logger.debug("❌ Unsupported status byte 0x%02X at offset %s", status, offset)
        raise UnsupportedMessageError(status, offset)
    event: Event = event_cls.read(reader, status & 0x0F)
    return event
