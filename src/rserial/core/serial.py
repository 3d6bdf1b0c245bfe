"""
Micro R serialization: a tiny subset of R's native ("B\\n") binary format.

Columnar usage::

    write_header(out, 3)            # list of 3 attributes
    write_doubles(out, [1.5, 2.5])  # 1st attribute
    write_ints(out, [1, 2])         # 2nd attribute
    write_strings(out, [b"a", b"b"], [1, 1])
    write_names(out, [b"x", b"y", b"z"], [1, 1, 1])

or just ``write_tsv`` to send pre-formatted text.

Every function takes a file descriptor, a binary file-like object or an
``OutputStream`` and returns the number of bytes written. Nothing is
tracked between calls: the header count and the number of names must be
kept consistent by the caller (see ``FrameWriter`` for a checked variant).
"""

from __future__ import annotations

import struct
from itertools import islice
from typing import TYPE_CHECKING, Any, Optional, Sequence

from rserial.core.constants import (
    ASCII_MASK,
    ATTR_PAIRLIST_FLAGS,
    CHARSXP,
    DOUBLE_STRUCT,
    FORMAT_VERSION_3,
    INT_FLAGS,
    INT_STRUCT,
    LEVELS_SHIFT,
    LIST_FLAGS,
    LONG_LENGTH_MARKER,
    MAX_SHORT_LENGTH,
    NA_INTEGER,
    NA_REAL_BITS,
    NA_REAL_STRUCT,
    NA_STRING_FLAGS,
    NA_STRING_LENGTH,
    NAMES_SYMBOL,
    NATIVE_MAGIC,
    NILVALUE_SXP,
    REAL_FLAGS,
    STR_FLAGS,
    SYMBOL_FLAGS,
    UINT_STRUCT,
)
from rserial.core.errors import InvalidArgumentError
from rserial.core.stream import OutputStream, StreamLike

if TYPE_CHECKING:
    from rserial.config.config import EncoderConfig

NA_REAL_BYTES = NA_REAL_STRUCT.pack(NA_REAL_BITS)


def _resolve_config(config: Optional["EncoderConfig"]) -> "EncoderConfig":
    if config is not None:
        return config
    from rserial.config.config import DEFAULT_CONFIG

    return DEFAULT_CONFIG


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _checked_length(length: Optional[int], buffer: Any, what: str) -> int:
    """Validate ``length`` against the buffer size; default to the whole buffer."""
    try:
        available = len(buffer)
    except TypeError as e:
        raise InvalidArgumentError(f"{what} buffer must be a sized sequence") from e

    if length is None:
        return available
    if not _is_count(length):
        raise InvalidArgumentError(f"{what} length must be an int, got {length!r}")
    if length < 0:
        raise InvalidArgumentError(f"Negative {what} length: {length}")
    if length > available:
        raise InvalidArgumentError(
            f"{what} length {length} exceeds buffer size {available}"
        )
    return length


def _pack_length(out: bytearray, length: int) -> None:
    if length > MAX_SHORT_LENGTH:
        # Long vector: marker, then upper and lower 32-bit halves
        out += INT_STRUCT.pack(LONG_LENGTH_MARKER)
        out += UINT_STRUCT.pack(length >> 32)
        out += UINT_STRUCT.pack(length & 0xFFFFFFFF)
    else:
        out += INT_STRUCT.pack(length)


def _pack_charsxp(out: bytearray, data: bytes, levels: int) -> None:
    if data.isascii():
        levels = ASCII_MASK
    out += INT_STRUCT.pack(CHARSXP | (levels << LEVELS_SHIFT))
    out += INT_STRUCT.pack(len(data))
    out += data


def _string_bytes(value: Any, index: int) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidArgumentError(
        f"String element {index} must be bytes or str, got {type(value).__name__}"
    )


def _pack_string_vector(
    out: bytearray,
    buffer: Sequence[Any],
    n: Optional[Sequence[int]],
    length: int,
    levels: int,
) -> None:
    if n is not None and len(n) < length:
        raise InvalidArgumentError(
            f"Only {len(n)} string lengths supplied for {length} strings"
        )

    out += INT_STRUCT.pack(STR_FLAGS)
    _pack_length(out, length)
    for i, value in enumerate(islice(buffer, length)):
        if value is None:
            out += INT_STRUCT.pack(NA_STRING_FLAGS)
            out += INT_STRUCT.pack(NA_STRING_LENGTH)
            continue

        raw = _string_bytes(value, i)
        size = len(raw) if n is None else n[i]
        if not _is_count(size) or size < 0:
            raise InvalidArgumentError(f"Invalid length for string {i}: {size!r}")
        if size > len(raw):
            raise InvalidArgumentError(
                f"Length {size} for string {i} exceeds its {len(raw)} bytes"
            )
        # The supplied length is authoritative: shorter values truncate
        _pack_charsxp(out, raw[:size], levels)


def write_header(
    stream: StreamLike, length: int, config: Optional["EncoderConfig"] = None
) -> int:
    """
    Write the serialization envelope and open a list of ``length`` attributes.

    The output size depends only on the format version (22 bytes for v2).
    """
    if not _is_count(length) or length < 0:
        raise InvalidArgumentError(f"Invalid attribute count: {length!r}")

    cfg = _resolve_config(config)
    out = bytearray(NATIVE_MAGIC)
    out += INT_STRUCT.pack(cfg.format_version)
    out += INT_STRUCT.pack(cfg.packed_writer_version)
    out += INT_STRUCT.pack(cfg.min_reader_version)
    if cfg.format_version == FORMAT_VERSION_3:
        encoding = cfg.native_encoding.encode("ascii")
        out += INT_STRUCT.pack(len(encoding))
        out += encoding

    out += INT_STRUCT.pack(LIST_FLAGS)
    _pack_length(out, length)
    return OutputStream.wrap(stream).write_block("header", bytes(out))


def write_doubles(
    stream: StreamLike, buffer: Sequence[Optional[float]], length: Optional[int] = None
) -> int:
    """Write a numeric (REALSXP) vector. ``None`` elements become ``NA_real_``."""
    count = _checked_length(length, buffer, "double")
    items = list(islice(buffer, count))
    if any(isinstance(v, bool) for v in items):
        raise InvalidArgumentError("Invalid double value: bool elements are not numbers")

    out = bytearray(INT_STRUCT.pack(REAL_FLAGS))
    _pack_length(out, count)
    try:
        if any(v is None for v in items):
            out += b"".join(
                NA_REAL_BYTES if v is None else DOUBLE_STRUCT.pack(v) for v in items
            )
        else:
            out += struct.pack(f"={count}d", *items)
    except struct.error as e:
        raise InvalidArgumentError(f"Invalid double value: {e}") from e

    return OutputStream.wrap(stream).write_block("doubles", bytes(out))


def write_ints(
    stream: StreamLike, buffer: Sequence[Optional[int]], length: Optional[int] = None
) -> int:
    """Write an integer (INTSXP) vector of 32-bit values. ``None`` becomes ``NA_integer_``."""
    count = _checked_length(length, buffer, "int")
    items = [NA_INTEGER if v is None else v for v in islice(buffer, count)]
    if any(isinstance(v, bool) for v in items):
        raise InvalidArgumentError("Invalid int32 value: bool elements are not integers")

    out = bytearray(INT_STRUCT.pack(INT_FLAGS))
    _pack_length(out, count)
    try:
        out += struct.pack(f"={count}i", *items)
    except struct.error as e:
        raise InvalidArgumentError(f"Invalid int32 value: {e}") from e

    return OutputStream.wrap(stream).write_block("ints", bytes(out))


def write_strings(
    stream: StreamLike,
    buffer: Sequence[Any],
    n: Optional[Sequence[int]] = None,
    length: Optional[int] = None,
    config: Optional["EncoderConfig"] = None,
) -> int:
    """
    Write a character (STRSXP) vector.

    Args:
        buffer: bytes (or str, encoded UTF-8) elements; ``None`` is ``NA_character_``
        n: byte length of each element, not inferred from content when given
        length: number of strings to write (defaults to ``len(buffer)``)
    """
    count = _checked_length(length, buffer, "string")
    out = bytearray()
    _pack_string_vector(out, buffer, n, count, _resolve_config(config).string_levels)
    return OutputStream.wrap(stream).write_block("strings", bytes(out))


def write_names(
    stream: StreamLike,
    buffer: Sequence[Any],
    n: Optional[Sequence[int]] = None,
    length: Optional[int] = None,
    config: Optional["EncoderConfig"] = None,
) -> int:
    """
    Write the ``names`` attribute that closes the list opened by ``write_header``.

    ``length`` must match the header's attribute count; this is not checked.
    """
    count = _checked_length(length, buffer, "names")

    out = bytearray(INT_STRUCT.pack(ATTR_PAIRLIST_FLAGS))
    out += INT_STRUCT.pack(SYMBOL_FLAGS)
    _pack_charsxp(out, NAMES_SYMBOL, ASCII_MASK)
    _pack_string_vector(out, buffer, n, count, _resolve_config(config).string_levels)
    out += INT_STRUCT.pack(NILVALUE_SXP)
    return OutputStream.wrap(stream).write_block("names", bytes(out))


def write_tsv(stream: StreamLike, buf: Any, nlines: int) -> int:
    """
    Write ``"<nlines>\\n"`` followed by ``buf`` verbatim.

    ``nlines`` is trusted; ``buf`` is never scanned for newlines. With
    ``nlines == 0`` only ``"0\\n"`` is written.
    """
    if not _is_count(nlines) or nlines < 0:
        raise InvalidArgumentError(f"Invalid line count: {nlines!r}")

    payload = f"{nlines}\n".encode("ascii")
    if nlines > 0:
        if isinstance(buf, str):
            payload += buf.encode("utf-8")
        elif isinstance(buf, (bytes, bytearray, memoryview)):
            payload += bytes(buf)
        else:
            raise InvalidArgumentError(
                f"TSV buffer must be bytes or str, got {type(buf).__name__}"
            )

    return OutputStream.wrap(stream).write_block("tsv", payload)


__all__ = [
    "write_header",
    "write_doubles",
    "write_ints",
    "write_strings",
    "write_names",
    "write_tsv",
]
