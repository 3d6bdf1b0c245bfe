"""
FrameWriter: checked construction of one columnar object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence

from rserial.core.errors import EncoderError, InvalidArgumentError, ProtocolError
from rserial.core.models import Column, ColumnKind, FrameState, FrameStats
from rserial.core.serial import (
    write_doubles,
    write_header,
    write_ints,
    write_names,
    write_strings,
)
from rserial.core.stream import OutputStream, StreamLike
from rserial.utils.logging import get_logger

if TYPE_CHECKING:
    from rserial.config.config import EncoderConfig

logger = get_logger(__name__)


class FrameWriter:
    """
    Writes header, vectors and names in order, rejecting illegal sequences.

    States: EMPTY -> HEADER_WRITTEN -> VECTORS_WRITTEN -> NAMES_WRITTEN.
    Any write failure moves the writer to ABORTED; the stream is left as is
    and no further calls are accepted.
    """

    def __init__(
        self,
        stream: StreamLike,
        ncols: int,
        config: Optional["EncoderConfig"] = None,
    ):
        """
        Args:
            stream: File descriptor, binary file object or OutputStream
            ncols: Number of attributes declared in the header
            config: Optional EncoderConfig (defaults apply otherwise)
        """
        if isinstance(ncols, bool) or not isinstance(ncols, int) or ncols < 0:
            raise ProtocolError(f"Invalid column count: {ncols!r}")

        self._stream = OutputStream.wrap(stream)
        self.ncols = ncols
        self.config = config

        # State
        self.state = FrameState.EMPTY
        self._columns_written = 0
        self._bytes_written = 0
        self._closed = False

    def _require(self, *allowed: FrameState) -> None:
        if self._closed:
            raise ProtocolError("Writer is already closed")
        if self.state not in allowed:
            raise ProtocolError(
                f"Illegal call in state {self.state.value} "
                f"(expected {', '.join(s.value for s in allowed)})"
            )

    def _run(self, write, *args: Any, **kwargs: Any) -> int:
        try:
            written = write(self._stream, *args, **kwargs)
        except InvalidArgumentError:
            raise
        except EncoderError as e:
            self._bytes_written += e.bytes_written
            self.state = FrameState.ABORTED
            logger.warning(
                "frame_aborted",
                columns_written=self._columns_written,
                declared_columns=self.ncols,
                error=str(e),
            )
            raise
        self._bytes_written += written
        return written

    def write_header(self) -> int:
        self._require(FrameState.EMPTY)
        written = self._run(write_header, self.ncols, config=self.config)
        self.state = FrameState.HEADER_WRITTEN
        return written

    def _add_vector(self, write, *args: Any, **kwargs: Any) -> int:
        self._require(FrameState.HEADER_WRITTEN, FrameState.VECTORS_WRITTEN)
        if self._columns_written >= self.ncols:
            raise ProtocolError(
                f"Header declared {self.ncols} columns; cannot add another"
            )
        written = self._run(write, *args, **kwargs)
        self._columns_written += 1
        self.state = FrameState.VECTORS_WRITTEN
        return written

    def add_doubles(self, values: Sequence[Optional[float]], length: Optional[int] = None) -> int:
        return self._add_vector(write_doubles, values, length)

    def add_ints(self, values: Sequence[Optional[int]], length: Optional[int] = None) -> int:
        return self._add_vector(write_ints, values, length)

    def add_strings(
        self,
        values: Sequence[Any],
        n: Optional[Sequence[int]] = None,
        length: Optional[int] = None,
    ) -> int:
        return self._add_vector(write_strings, values, n, length, config=self.config)

    def add_column(self, column: Column) -> int:
        if column.kind == ColumnKind.DOUBLE:
            return self.add_doubles(column.values)
        if column.kind == ColumnKind.INT:
            return self.add_ints(column.values)
        return self.add_strings(column.values)

    def write_names(
        self, names: Sequence[Any], n: Optional[Sequence[int]] = None
    ) -> int:
        """
        Close the object with one name per declared column.

        Raises:
            ProtocolError: Wrong number of names or columns still missing
        """
        allowed = (FrameState.VECTORS_WRITTEN,)
        if self.ncols == 0:
            allowed = (FrameState.HEADER_WRITTEN,)
        self._require(*allowed)

        if self._columns_written != self.ncols:
            raise ProtocolError(
                f"Only {self._columns_written} of {self.ncols} columns written"
            )
        if len(names) != self.ncols:
            raise ProtocolError(
                f"Got {len(names)} names for {self.ncols} declared columns"
            )

        written = self._run(write_names, names, n, config=self.config)
        self.state = FrameState.NAMES_WRITTEN
        return written

    def get_stats(self) -> FrameStats:
        return FrameStats(
            declared_columns=self.ncols,
            written_columns=self._columns_written,
            bytes_written=self._bytes_written,
            state=self.state,
        )

    def close(self) -> None:
        """
        Finish the object. The underlying stream stays open.

        Raises:
            ProtocolError: Object is incomplete
        """
        if self._closed:
            return
        self._closed = True
        if self.state not in (FrameState.NAMES_WRITTEN, FrameState.ABORTED):
            raise ProtocolError(
                f"Object closed in state {self.state.value}: "
                f"{self._columns_written} of {self.ncols} columns written"
            )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            # Let the caller see the failure itself; the object is already broken
            self._closed = True
            return False
        self.close()
        return False


def write_frame(
    stream: StreamLike,
    columns: Mapping[str, Sequence[Any]],
    config: Optional["EncoderConfig"] = None,
) -> int:
    """
    Encode ``{name: values}`` as one named list, inferring each column's type.

    Returns:
        Total number of bytes written
    """
    resolved: List[Column] = [Column.infer(name, values) for name, values in columns.items()]

    with FrameWriter(stream, len(resolved), config=config) as writer:
        writer.write_header()
        for column in resolved:
            writer.add_column(column)
        writer.write_names([c.name for c in resolved])

    return writer.get_stats().bytes_written


__all__ = ["FrameWriter", "write_frame"]
