"""
Column and frame models used by the checked FrameWriter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from rserial.core.constants import INT32_MAX, INT32_MIN


class ColumnKind(str, Enum):
    """Vector element type of one attribute."""

    DOUBLE = "double"
    INT = "int"
    STRING = "string"


class FrameState(str, Enum):
    """Construction progress of one serialized object."""

    EMPTY = "empty"
    HEADER_WRITTEN = "header_written"
    VECTORS_WRITTEN = "vectors_written"
    NAMES_WRITTEN = "names_written"
    ABORTED = "aborted"


def infer_kind(values: Sequence[Any]) -> ColumnKind:
    """
    Pick the narrowest vector type holding every value.

    ``None`` is NA and fits any type. An all-NA column is a double column.
    Anything that is not an int or float (``bool`` included) makes the
    column a string column.
    """
    kind = ColumnKind.INT
    seen = False
    for v in values:
        if v is None:
            continue
        seen = True
        if isinstance(v, bool):
            return ColumnKind.STRING
        if isinstance(v, int):
            # INT32_MIN is NA_integer_ in R
            if not INT32_MIN < v <= INT32_MAX:
                kind = ColumnKind.DOUBLE
        elif isinstance(v, float):
            kind = ColumnKind.DOUBLE
        else:
            return ColumnKind.STRING
    if not seen:
        return ColumnKind.DOUBLE
    return kind


@dataclass
class Column:
    """
    One named attribute of a columnar object.

    Attributes:
        name: Attribute label written in the names block
        kind: Vector element type
        values: Elements; ``None`` is NA
    """

    name: str
    kind: ColumnKind
    values: Sequence[Any]

    @classmethod
    def infer(cls, name: str, values: Sequence[Any]) -> "Column":
        """Infer the kind; string columns get every non-text element as ``str``."""
        kind = infer_kind(values)
        if kind == ColumnKind.STRING:
            values = [
                v if v is None or isinstance(v, (str, bytes, bytearray)) else str(v)
                for v in values
            ]
        return cls(name=name, kind=kind, values=values)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"Column(name={self.name!r}, kind={self.kind.value}, length={len(self)})"


@dataclass
class FrameStats:
    """
    Statistics for one written object.
    """

    declared_columns: int
    written_columns: int
    bytes_written: int
    state: FrameState

    @property
    def complete(self) -> bool:
        return self.state == FrameState.NAMES_WRITTEN

    def __repr__(self) -> str:
        return (
            f"FrameStats(columns={self.written_columns}/{self.declared_columns}, "
            f"bytes={self.bytes_written}, state={self.state.value})"
        )


__all__ = ["ColumnKind", "FrameState", "Column", "FrameStats", "infer_kind"]
