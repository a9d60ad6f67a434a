"""Big-endian primitive reader and writer over binary streams.

Every chunk and event codec in this package talks to these two classes
instead of to the raw stream, so short reads surface as
:class:`~smfcodec.errors.FormatError` in one place and the writer exposes
the ``tell``/``seek`` pair that track serialization needs to backpatch
chunk lengths.
"""
from __future__ import annotations

import io
import struct
from typing import BinaryIO

from smfcodec.errors import FormatError, ValidationError

_UINT16 = struct.Struct(">H")
_UINT32 = struct.Struct(">I")


class BigEndianReader:
    """Fixed-width big-endian reads from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    @classmethod
    def from_bytes(cls, data: bytes) -> BigEndianReader:
        return cls(io.BytesIO(data))

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, position: int) -> None:
        self._stream.seek(position)

    def read_bytes(self, count: int) -> bytes:
        """Read exactly *count* bytes.

        Raises:
            FormatError: When the stream ends first.
        """
        data = self._stream.read(count)
        if len(data) != count:
            raise FormatError(
                f"Unexpected end of data: wanted {count} byte(s), got {len(data)}"
            )
        return data

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint16(self) -> int:
        value: int = _UINT16.unpack(self.read_bytes(2))[0]
        return value

    def read_uint32(self) -> int:
        value: int = _UINT32.unpack(self.read_bytes(4))[0]
        return value


class BigEndianWriter:
    """Fixed-width big-endian writes to a seekable binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, position: int) -> None:
        self._stream.seek(position)

    def write_bytes(self, data: bytes) -> None:
        self._stream.write(data)

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValidationError(f"Byte value out of range: {value}")
        self._stream.write(bytes((value,)))

    def write_uint16(self, value: int) -> None:
        if not 0 <= value <= 0xFFFF:
            raise ValidationError(f"16-bit value out of range: {value}")
        self._stream.write(_UINT16.pack(value))

    def write_uint32(self, value: int) -> None:
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValidationError(f"32-bit value out of range: {value}")
        self._stream.write(_UINT32.pack(value))
