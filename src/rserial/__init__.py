"""rserial - micro encoder for R's native binary serialization format."""

__version__ = "0.1.0"

from .config import EncoderConfig  # noqa: E402
from .core import (  # noqa: E402
    EncoderError,
    FrameWriter,
    InvalidArgumentError,
    OutputStream,
    ProtocolError,
    ShortWriteError,
    StreamWriteError,
    write_doubles,
    write_frame,
    write_header,
    write_ints,
    write_names,
    write_strings,
    write_tsv,
)

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
    "EncoderConfig",
    "EncoderError",
    "InvalidArgumentError",
    "ShortWriteError",
    "StreamWriteError",
    "ProtocolError",
]
