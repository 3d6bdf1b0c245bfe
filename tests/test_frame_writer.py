"""Tests for the checked FrameWriter and write_frame."""

import io

import pytest

from rds_decoder import unserialize
from rserial.config import EncoderConfig
from rserial.core import (
    FrameState,
    FrameWriter,
    InvalidArgumentError,
    ProtocolError,
    ShortWriteError,
    write_frame,
)


@pytest.mark.unit
def test_frame_writer_happy_path(out: io.BytesIO) -> None:
    with FrameWriter(out, 2) as writer:
        writer.write_header()
        writer.add_doubles([0.5, 1.5])
        writer.add_strings([b"a", b"b"], [1, 1])
        writer.write_names([b"x", b"y"])

    stats = writer.get_stats()
    assert stats.complete
    assert stats.written_columns == 2
    assert stats.bytes_written == len(out.getvalue())

    obj = unserialize(out.getvalue())
    assert obj.names == [b"x", b"y"]
    assert obj.columns[0].values == [0.5, 1.5]


@pytest.mark.unit
def test_vector_before_header_rejected(out: io.BytesIO) -> None:
    writer = FrameWriter(out, 1)

    with pytest.raises(ProtocolError, match="state empty"):
        writer.add_ints([1])

    assert out.getvalue() == b""


@pytest.mark.unit
def test_header_twice_rejected(out: io.BytesIO) -> None:
    writer = FrameWriter(out, 1)
    writer.write_header()

    with pytest.raises(ProtocolError):
        writer.write_header()


@pytest.mark.unit
def test_too_many_vectors_rejected(out: io.BytesIO) -> None:
    writer = FrameWriter(out, 1)
    writer.write_header()
    writer.add_ints([1])
    size = len(out.getvalue())

    with pytest.raises(ProtocolError, match="cannot add another"):
        writer.add_ints([2])

    assert len(out.getvalue()) == size


@pytest.mark.unit
@pytest.mark.parametrize("names", [[b"a", b"b"], [b"a", b"b", b"c", b"d"]])
def test_name_count_mismatch_detected(out: io.BytesIO, names) -> None:
    writer = FrameWriter(out, 3)
    writer.write_header()
    for _ in range(3):
        writer.add_ints([1])

    with pytest.raises(ProtocolError, match="names for 3 declared columns"):
        writer.write_names(names)

    assert writer.state == FrameState.VECTORS_WRITTEN


@pytest.mark.unit
def test_names_before_all_vectors_rejected(out: io.BytesIO) -> None:
    writer = FrameWriter(out, 2)
    writer.write_header()
    writer.add_ints([1])

    with pytest.raises(ProtocolError, match="Only 1 of 2"):
        writer.write_names([b"a", b"b"])


@pytest.mark.unit
def test_zero_columns_object(out: io.BytesIO) -> None:
    with FrameWriter(out, 0) as writer:
        writer.write_header()
        writer.write_names([])

    obj = unserialize(out.getvalue())
    assert obj.columns == []
    assert obj.names == []


@pytest.mark.unit
def test_incomplete_object_fails_on_close(out: io.BytesIO) -> None:
    with pytest.raises(ProtocolError, match="closed in state vectors_written"):
        with FrameWriter(out, 2) as writer:
            writer.write_header()
            writer.add_ints([1])


@pytest.mark.unit
def test_invalid_argument_keeps_state(out: io.BytesIO) -> None:
    writer = FrameWriter(out, 1)
    writer.write_header()

    with pytest.raises(InvalidArgumentError):
        writer.add_ints([2**40])

    assert writer.state == FrameState.HEADER_WRITTEN
    writer.add_ints([1])
    writer.write_names([b"a"])
    writer.close()
    assert unserialize(out.getvalue()).columns[0].values == [1]


@pytest.mark.unit
def test_write_failure_aborts_writer(short_sink) -> None:
    writer = FrameWriter(short_sink, 1)

    with pytest.raises(ShortWriteError):
        writer.write_header()

    assert writer.state == FrameState.ABORTED
    assert writer.get_stats().bytes_written == 5
    with pytest.raises(ProtocolError):
        writer.add_ints([1])
    assert len(short_sink.calls) == 1
    writer.close()


@pytest.mark.unit
@pytest.mark.parametrize("ncols", [-1, 1.0, True])
def test_invalid_column_count(out: io.BytesIO, ncols) -> None:
    with pytest.raises(ProtocolError):
        FrameWriter(out, ncols)


@pytest.mark.unit
def test_write_frame_infers_column_types(out: io.BytesIO) -> None:
    columns = {
        "id": [1, 2, 3],
        "score": [0.5, None, 2],
        "label": ["a", None, "ccc"],
    }

    written = write_frame(out, columns)
    obj = unserialize(out.getvalue())

    assert written == len(out.getvalue())
    assert [c.sexptype for c in obj.columns] == [13, 14, 16]
    assert obj.columns[1].values == [0.5, None, 2.0]
    assert obj.columns[2].values == [b"a", None, b"ccc"]
    assert obj.names == [b"id", b"score", b"label"]


@pytest.mark.unit
def test_write_frame_honours_config(out: io.BytesIO) -> None:
    write_frame(out, {"x": [1]}, config=EncoderConfig(format_version=3))

    obj = unserialize(out.getvalue())
    assert obj.version == 3
    assert obj.names == [b"x"]


@pytest.mark.unit
@pytest.mark.parametrize("values", [[1, "x"], ["x", 2.5, None], [True, False]])
def test_write_frame_mixed_column_is_written_as_strings(out: io.BytesIO, values) -> None:
    written = write_frame(out, {"a": values})
    obj = unserialize(out.getvalue())

    assert written == len(out.getvalue())
    assert obj.columns[0].sexptype == 16
    assert obj.columns[0].values == [
        None if v is None else str(v).encode("ascii") for v in values
    ]
    assert obj.names == [b"a"]
