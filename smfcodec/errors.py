"""Exit-code contract and exception types for smfcodec."""
from __future__ import annotations

import enum


class ExitCode(enum.IntEnum):
    """Standardised CLI exit codes.

    0 — success
    1 — user error (bad arguments, missing file)
    2 — invalid MIDI data
    3 — internal error
    """

    SUCCESS = 0
    USER_ERROR = 1
    INVALID_MIDI = 2
    INTERNAL_ERROR = 3


class SmfError(Exception):
    """Base exception for everything the codec raises on bad input."""

    def __init__(self, message: str, exit_code: ExitCode = ExitCode.INVALID_MIDI) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class FormatError(SmfError, ValueError):
    """Raised when the byte stream is not a well-formed SMF.

    Covers bad chunk magic, a header length other than 6, truncated chunks
    and delta times that need more than four bytes.
    """


class UnsupportedMessageError(FormatError):
    """Raised when a track holds a status byte the parser does not know.

    Files that rely on running status land here too, since the status byte
    of every event must be present.
    """

    def __init__(self, status: int, offset: int | None = None) -> None:
        where = f" at payload offset {offset}" if offset is not None else ""
        super().__init__(f"Unsupported MIDI status byte 0x{status:02X}{where}")
        self.status = status
        self.offset = offset


class ValidationError(SmfError, ValueError):
    """Raised when a value cannot be represented on the wire.

    Examples: a meta payload over 255 bytes, a channel outside 0–15, or a
    track that does not end with a meta event when it is written.
    """


class OutOfRangeError(SmfError, IndexError):
    """Raised when a cursor or track index falls outside its sequence."""

    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=ExitCode.USER_ERROR)
