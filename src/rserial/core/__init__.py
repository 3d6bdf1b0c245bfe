"""rserial core functionality."""

from .errors import (
    EncoderError,
    InvalidArgumentError,
    ProtocolError,
    ShortWriteError,
    StreamWriteError,
)
from .frame_writer import FrameWriter, write_frame
from .models import Column, ColumnKind, FrameState, FrameStats
from .serial import (
    write_doubles,
    write_header,
    write_ints,
    write_names,
    write_strings,
    write_tsv,
)
from .stream import OutputStream

__all__ = [
    "write_header",
    "write_doubles",
    "write_ints",
    "write_strings",
    "write_names",
    "write_tsv",
    "FrameWriter",
    "write_frame",
    "OutputStream",
    "Column",
    "ColumnKind",
    "FrameState",
    "FrameStats",
    "EncoderError",
    "InvalidArgumentError",
    "ShortWriteError",
    "StreamWriteError",
    "ProtocolError",
]
