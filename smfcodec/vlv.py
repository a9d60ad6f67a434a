"""MIDI variable-length quantity (VLV) codec and the delta-time entry.

Each encoded byte carries 7 data bits; the high bit is set on every byte
except the last.  Groups are emitted most-significant first, so ``0x80``
encodes as ``81 00`` and ``0x0FFFFFFF`` as ``FF FF FF 7F``.

Delta times are bounded to four encoded bytes (28 significant bits), the
limit the SMF format itself sets.  Larger values are rejected rather than
truncated: :func:`encode` raises :class:`~smfcodec.errors.ValidationError`
and the decoders raise :class:`~smfcodec.errors.FormatError` when a fifth
byte would be needed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from smfcodec.constants import Key
from smfcodec.errors import FormatError, ValidationError
from smfcodec.stream import BigEndianReader, BigEndianWriter

MAX_VLV_BYTES = 4
MAX_VLV_VALUE = 0x0FFFFFFF

_CONTINUATION = 0x80
_GROUP_MASK = 0x7F


def _check_value(value: int) -> None:
    if not 0 <= value <= MAX_VLV_VALUE:
        raise ValidationError(
            f"Delta time {value} outside 0..0x{MAX_VLV_VALUE:07X} (four VLV bytes)"
        )


def encode(value: int) -> bytes:
    """Encode a non-negative integer as a VLV byte string.

    Raises:
        ValidationError: When *value* is negative or needs more than 4 bytes.
    """
    _check_value(value)
    out = bytearray((value & _GROUP_MASK,))
    value >>= 7
    while value:
        out.insert(0, (value & _GROUP_MASK) | _CONTINUATION)
        value >>= 7
    return bytes(out)


def decode(data: bytes) -> int:
    """Decode one complete VLV byte string to an integer.

    *data* must hold exactly one encoded value: the last byte has its high
    bit clear and every earlier byte has it set.

    Raises:
        FormatError: On empty input, a missing terminal byte, bytes after the
            terminal byte, or more than 4 bytes.
    """
    if not data:
        raise FormatError("Cannot decode an empty VLV")
    result = 0
    for index, byte in enumerate(data):
        if index == MAX_VLV_BYTES:
            raise FormatError(f"VLV longer than {MAX_VLV_BYTES} bytes: {data.hex()}")
        result = (result << 7) | (byte & _GROUP_MASK)
        if not byte & _CONTINUATION:
            if index != len(data) - 1:
                raise FormatError(f"Trailing bytes after VLV terminator: {data.hex()}")
            return result
    raise FormatError(f"VLV is missing its terminal byte: {data.hex()}")


def read_vlv(reader: BigEndianReader) -> int:
    """Consume one VLV from *reader* and return its value.

    Raises:
        FormatError: When the stream ends mid-value or the value runs past
            4 bytes.
    """
    result = 0
    for _ in range(MAX_VLV_BYTES):
        byte = reader.read_byte()
        result = (result << 7) | (byte & _GROUP_MASK)
        if not byte & _CONTINUATION:
            return result
    raise FormatError(f"Delta time longer than {MAX_VLV_BYTES} bytes")


@dataclass
class VLV:
    """A delta-time entry in a track's message sequence.

    Unlike the event variants a ``VLV`` is mutable: ``add`` and ``+=`` grow
    it in place, which is how adjacent delta times are merged.
    """

    value: int = 0

    key: ClassVar[Key] = Key.VLV
    kind: ClassVar[str] = "delta"
    channel: ClassVar[None] = None

    def __post_init__(self) -> None:
        _check_value(self.value)

    def add(self, value: int) -> None:
        """Add *value* ticks to this delta time."""
        total = self.value + value
        _check_value(total)
        self.value = total

    def __iadd__(self, other: VLV | int) -> VLV:
        self.add(other.value if isinstance(other, VLV) else other)
        return self

    def __int__(self) -> int:
        return self.value

    def parameter(self, index: int) -> Any:
        return self.value if index == 0 else None

    def parameter_as_int(self, index: int) -> int:
        return self.value if index == 0 else 0

    def to_bytes(self) -> bytes:
        return encode(self.value)

    def write(self, writer: BigEndianWriter, fallback_channel: int = 0) -> None:
        """Write the encoded delta; *fallback_channel* is accepted and ignored."""
        writer.write_bytes(encode(self.value))

    @classmethod
    def read(cls, reader: BigEndianReader) -> VLV:
        return cls(read_vlv(reader))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "value": self.value}
