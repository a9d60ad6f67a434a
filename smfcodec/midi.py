"""Whole-file container: the MThd header plus an ordered list of tracks.

Provides:

- ``Midi`` — build a file programmatically or parse one with
  :meth:`Midi.load` (path, open binary stream or raw bytes).
- ``Midi.write`` — serialize to a path or binary stream.

Header layout (big-endian)::

    "MThd"  length=6 (uint32)  format (uint16)  track count (uint16)  PPQ (uint16)

The track count is always derived from the track list; it is never stored.
Each track is written with its position in the file as the fallback channel
for events that have none of their own.
"""
from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterable
from typing import BinaryIO, Union

from smfcodec.constants import (
    DEFAULT_FORMAT_TYPE,
    DEFAULT_PPQ,
    HEADER_LENGTH,
    HEADER_MAGIC,
)
from smfcodec.errors import FormatError, OutOfRangeError, ValidationError
from smfcodec.stream import BigEndianReader, BigEndianWriter
from smfcodec.track import Track

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
Source = Union[PathLike, BinaryIO, bytes, bytearray]
Target = Union[PathLike, BinaryIO]


class Midi:
    """A Standard MIDI File: format type, PPQ resolution and tracks."""

    def __init__(
        self,
        format_type: int = DEFAULT_FORMAT_TYPE,
        ppq: int = DEFAULT_PPQ,
        tracks: Iterable[Track] = (),
    ) -> None:
        self.format_type = format_type
        self.ppq = ppq
        self._tracks: list[Track] = list(tracks)

    def __repr__(self) -> str:
        return (
            f"Midi(format_type={self.format_type}, ppq={self.ppq}, "
            f"tracks={len(self._tracks)})"
        )

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def track_count(self) -> int:
        return len(self._tracks)

    def add_track(self, track: Track | None = None) -> Track:
        """Append *track* (or a new empty one) and return it."""
        if track is None:
            track = Track()
        self._tracks.append(track)
        return track

    def get_track(self, index: int) -> Track:
        if not 0 <= index < len(self._tracks):
            raise OutOfRangeError(f"Track {index} does not exist ({len(self._tracks)} tracks)")
        return self._tracks[index]

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def read(cls, reader: BigEndianReader) -> Midi:
        """Parse a complete file from *reader*.

        Raises:
            FormatError: Bad ``MThd`` magic, a header length other than 6, or
                any malformed track.
            UnsupportedMessageError: A track holds an unknown status byte.
        """
        magic = reader.read_bytes(4)
        if magic != HEADER_MAGIC:
            raise FormatError(f"Not a recognised MIDI file: magic {magic!r}")
        header_length = reader.read_uint32()
        if header_length != HEADER_LENGTH:
            raise FormatError(
                f"Wrong header size: expected {HEADER_LENGTH}, got {header_length}"
            )
        format_type = reader.read_uint16()
        track_count = reader.read_uint16()
        ppq = reader.read_uint16()

        midi = cls(format_type=format_type, ppq=ppq)
        for _ in range(track_count):
            midi._tracks.append(Track.read(reader))

        logger.debug(
            "✅ Parsed MIDI: format %d, %d track(s), PPQ %d",
            format_type,
            track_count,
            ppq,
        )
        return midi

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> Midi:
        return cls.read(BigEndianReader.from_bytes(bytes(data)))

    @classmethod
    def load(cls, source: Source) -> Midi:
        """Parse a file from a path, an open binary stream, or raw bytes.

        Files opened here are closed on every exit path; streams passed in
        are left open for the caller.
        """
        if isinstance(source, (bytes, bytearray)):
            return cls.from_bytes(source)
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as fh:
                return cls.read(BigEndianReader(fh))
        return cls.read(BigEndianReader(source))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def write_to(self, writer: BigEndianWriter) -> None:
        """Write the header and every track to a seekable *writer*.

        All tracks are validated before the header is written.

        Raises:
            ValidationError: A track is not terminated by a meta event, or a
                header field does not fit in 16 bits.
        """
        for name, value in (("format_type", self.format_type), ("ppq", self.ppq)):
            if not 0 <= value <= 0xFFFF:
                raise ValidationError(f"Header field {name} does not fit in 16 bits: {value}")
        for index, track in enumerate(self._tracks):
            track.validate_for_write(index)

        writer.write_bytes(HEADER_MAGIC)
        writer.write_uint32(HEADER_LENGTH)
        writer.write_uint16(self.format_type)
        writer.write_uint16(len(self._tracks))
        writer.write_uint16(self.ppq)
        for index, track in enumerate(self._tracks):
            track.write_to(writer, index)

        logger.debug(
            "✅ Wrote MIDI: format %d, %d track(s), PPQ %d",
            self.format_type,
            len(self._tracks),
            self.ppq,
        )

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write_to(BigEndianWriter(buffer))
        return buffer.getvalue()

    def write(self, target: Target) -> None:
        """Write the file to a path or a binary stream.

        Non-seekable streams (pipes, stdout) and streams opened for appending
        receive a fully serialized buffer, since chunk lengths are backpatched
        and appends ignore seeks.
        """
        if isinstance(target, (str, os.PathLike)):
            data = self.to_bytes()
            with open(target, "wb") as fh:
                fh.write(data)
            logger.debug("✅ Wrote %d bytes to %s", len(data), target)
            return
        if target.seekable() and "a" not in str(getattr(target, "mode", "")):
            self.write_to(BigEndianWriter(target))
        else:
            target.write(self.to_bytes())
