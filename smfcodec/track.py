"""Track chunks: an owned message sequence, cursors, and MTrk framing.

A track's entries alternate between ``VLV`` delta times and events.  The
``add_*`` methods keep that shape: an event added without a preceding delta
gets a zero delta, and a delta added after another delta is merged into it.
No two ``VLV`` entries are ever adjacent.

Serialization writes the ``MTrk`` magic, a placeholder length, every entry,
then seeks back and backpatches the real payload length.  A track must end
with a meta event (normally end-of-track, ``FF 2F 00``); that and every
channel resolution are checked before the first byte is written, so a
failed write never leaves a half-written chunk behind.
"""
from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Iterator

from smfcodec.constants import META_CHANNEL, TRACK_MAGIC, Key
from smfcodec.errors import FormatError, OutOfRangeError, ValidationError
from smfcodec.messages import Event, Message, Meta, read_event
from smfcodec.stream import BigEndianReader, BigEndianWriter
from smfcodec.vlv import VLV

logger = logging.getLogger(__name__)


class TrackCursor:
    """A position over a track's entries.

    Cursors hold a reference to the track's entry list, not a copy, so they
    see messages appended after they were created.  Several cursors over one
    track move independently.
    """

    def __init__(self, entries: list[Message], position: int = 0) -> None:
        self._entries = entries
        self.position = position

    def __repr__(self) -> str:
        return f"TrackCursor(position={self.position}, length={len(self._entries)})"

    def _current(self) -> Message:
        if not 0 <= self.position < len(self._entries):
            raise OutOfRangeError(
                f"Cursor position {self.position} outside track of {len(self._entries)} entries"
            )
        return self._entries[self.position]

    def next(self) -> Message:
        """Return the entry at the cursor, then advance by one."""
        entry = self._current()
        self.position += 1
        return entry

    def previous(self) -> Message:
        """Return the entry at the cursor, then step back by one."""
        entry = self._current()
        self.position -= 1
        return entry

    def _ahead(self) -> Iterator[Message]:
        if self.position < 0:
            raise OutOfRangeError(f"Cannot scan from cursor position {self.position}")
        for index in range(self.position, len(self._entries)):
            yield self._entries[index]

    def check_rests(self) -> bool:
        """True when a positive delta time comes before the next note-on.

        Scans forward from the cursor: a ``NoteOn`` ends the scan with
        ``False``, a ``VLV`` greater than zero ends it with ``True``, and
        running off the end is ``False``.
        """
        for entry in self._ahead():
            if entry.key == Key.NOTE_ON:
                return False
            if isinstance(entry, VLV) and entry.value > 0:
                return True
        return False

    def check(self, target: Key, stop: Key | None = None) -> bool:
        """True when an entry of kind *target* lies ahead of the cursor.

        With *stop*, an entry of that kind reached first ends the scan with
        ``False``.
        """
        for entry in self._ahead():
            if entry.key == target:
                return True
            if stop is not None and entry.key == stop:
                return False
        return False


class Track:
    """An ordered sequence of delta times and events, with a default cursor."""

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._entries: list[Message] = []
        self._cursor = TrackCursor(self._entries)
        for message in messages:
            self.add_message(message)

    def __repr__(self) -> str:
        return f"Track(entries={len(self._entries)}, events={self.event_count})"

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Message:
        if not -len(self._entries) <= index < len(self._entries):
            raise OutOfRangeError(f"Entry {index} outside track of {len(self._entries)} entries")
        return self._entries[index]

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the entries, delta times included."""
        return tuple(self._entries)

    @property
    def event_count(self) -> int:
        return sum(1 for entry in self._entries if not isinstance(entry, VLV))

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_vlv(self, vlv: VLV | int) -> None:
        """Append a delta time, merging it into a trailing delta if there is one."""
        value = vlv.value if isinstance(vlv, VLV) else vlv
        if self._entries and isinstance(self._entries[-1], VLV):
            self._entries[-1] = VLV(self._entries[-1].value + value)
        else:
            self._entries.append(VLV(value))

    def add_message(self, message: Message, delta: VLV | int | None = None) -> None:
        """Append *message*, preceded by *delta* ticks when given.

        An event that would otherwise follow another event gets a zero delta
        in between.  Passing a ``VLV`` as *message* is the same as
        :meth:`add_vlv`.
        """
        if delta is not None:
            self.add_vlv(delta)
        if isinstance(message, VLV):
            self.add_vlv(message)
            return
        if not self._entries or not isinstance(self._entries[-1], VLV):
            self._entries.append(VLV(0))
        self._entries.append(message)

    def end_of_track(self, delta: VLV | int = 0) -> None:
        """Append the end-of-track meta event."""
        self.add_message(Meta.end_of_track(), delta)

    # ------------------------------------------------------------------
    # Cursor access
    # ------------------------------------------------------------------

    @property
    def position(self) -> int:
        return self._cursor.position

    @position.setter
    def position(self, value: int) -> None:
        self._cursor.position = value

    def cursor(self, position: int = 0) -> TrackCursor:
        """Return a new cursor over this track, independent of the default one."""
        return TrackCursor(self._entries, position)

    def next(self) -> Message:
        return self._cursor.next()

    def previous(self) -> Message:
        return self._cursor.previous()

    def check_rests(self) -> bool:
        return self._cursor.check_rests()

    def check(self, target: Key, stop: Key | None = None) -> bool:
        return self._cursor.check(target, stop)

    def check_non_meta_messages(self) -> bool:
        """True when the track holds any channel event (ignores the cursor)."""
        return any(entry.key not in (Key.META, Key.VLV) for entry in self._entries)

    def events(self) -> Iterator[tuple[int, Event]]:
        """Yield ``(delta, event)`` pairs in track order."""
        delta = 0
        for entry in self._entries:
            if isinstance(entry, VLV):
                delta = entry.value
            else:
                yield delta, entry
                delta = 0

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    @classmethod
    def read(cls, reader: BigEndianReader) -> Track:
        """Parse one ``MTrk`` chunk from *reader*.

        Raises:
            FormatError: Bad magic or a payload that ends mid-event.
            UnsupportedMessageError: A status byte with no known event.
        """
        magic = reader.read_bytes(4)
        if magic != TRACK_MAGIC:
            raise FormatError(f"Not a recognised track chunk: magic {magic!r}")
        length = reader.read_uint32()
        payload = BigEndianReader.from_bytes(reader.read_bytes(length))

        track = cls()
        entries = track._entries
        while payload.tell() < length:
            entries.append(VLV.read(payload))
            offset = payload.tell()
            entries.append(read_event(payload, payload.read_byte(), offset=offset))

        logger.debug("✅ Parsed track chunk: %d bytes, %d events", length, track.event_count)
        return track

    def validate_for_write(self, track_index: int) -> None:
        if not self._entries or self._entries[-1].key != Key.META:
            raise ValidationError(
                "Track is not terminated: the last entry must be a meta event (end-of-track)"
            )
        for entry in self._entries:
            if entry.key not in (Key.META, Key.VLV) and entry.channel is None:
                # Raises when the track index cannot stand in for a channel.
                entry.resolve_channel(track_index)  # type: ignore[union-attr]

    def write_to(self, writer: BigEndianWriter, track_index: int) -> int:
        """Write this track as an ``MTrk`` chunk and return its payload length.

        *track_index* is the fallback channel for events without one.

        Raises:
            ValidationError: The track does not end with a meta event, or an
                event without a channel cannot use *track_index* as one.
        """
        self.validate_for_write(track_index)

        writer.write_bytes(TRACK_MAGIC)
        writer.write_uint32(0)
        start = writer.tell()
        for entry in self._entries:
            if entry.key == Key.META:
                entry.write(writer, META_CHANNEL)
            else:
                entry.write(writer, track_index)
        end = writer.tell()

        length = end - start
        writer.seek(start - 4)
        writer.write_uint32(length)
        writer.seek(end)

        logger.debug("✅ Wrote track %d: %d bytes, %d events", track_index, length, self.event_count)
        return length

    def to_bytes(self, track_index: int = 0) -> bytes:
        """Serialize this track as a standalone ``MTrk`` chunk."""
        buffer = io.BytesIO()
        self.write_to(BigEndianWriter(buffer), track_index)
        return buffer.getvalue()
