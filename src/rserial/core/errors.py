"""
Encoder exception hierarchy.

Every error aborts the object being written. ``bytes_written`` tells the
caller whether the stream was left untouched (0) or holds a partial block.
"""

from __future__ import annotations


class EncoderError(Exception):
    """Base class for all encoder failures."""

    def __init__(self, message: str, bytes_written: int = 0) -> None:
        super().__init__(message)
        self.bytes_written = bytes_written

    @property
    def partially_written(self) -> bool:
        return self.bytes_written > 0


class InvalidArgumentError(EncoderError, ValueError):
    """Negative length, length larger than buffer, value out of range."""


class ShortWriteError(EncoderError):
    """The stream accepted fewer bytes than requested."""

    def __init__(self, bytes_written: int, bytes_expected: int) -> None:
        super().__init__(
            f"Short write: {bytes_written} of {bytes_expected} bytes accepted",
            bytes_written=bytes_written,
        )
        self.bytes_expected = bytes_expected


class StreamWriteError(EncoderError):
    """The underlying stream reported an OS/IO-level fault."""


class ProtocolError(EncoderError):
    """Calls made out of order on a FrameWriter."""


__all__ = [
    "EncoderError",
    "InvalidArgumentError",
    "ShortWriteError",
    "StreamWriteError",
    "ProtocolError",
]
