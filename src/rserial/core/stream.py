"""Append-only output sink over a file descriptor or binary file-like object."""

from __future__ import annotations

import os
from typing import Any, BinaryIO, Union

from rserial.core.errors import ShortWriteError, StreamWriteError
from rserial.monitoring.metrics import BLOCKS_WRITTEN, BYTES_WRITTEN, WRITE_FAILURES
from rserial.utils.logging import get_logger

logger = get_logger(__name__)

StreamLike = Union[int, BinaryIO, "OutputStream"]


class OutputStream:
    """
    Thin adapter giving every encoder operation a single write attempt.

    The handle is owned by the caller: it is never seeked, read, flushed or
    closed here.
    """

    def __init__(self, target: Any) -> None:
        if isinstance(target, bool):
            raise StreamWriteError(f"Not a writable stream: {target!r}")
        if isinstance(target, int):
            if target < 0:
                raise StreamWriteError(f"Invalid file descriptor: {target}")
            self._fd = target
            self._file = None
        elif callable(getattr(target, "write", None)):
            self._fd = None
            self._file = target
        else:
            raise StreamWriteError(f"Not a writable stream: {target!r}")

    @classmethod
    def wrap(cls, target: StreamLike) -> "OutputStream":
        if isinstance(target, OutputStream):
            return target
        return cls(target)

    @property
    def target(self) -> Any:
        return self._fd if self._fd is not None else self._file

    def _raw_write(self, payload: bytes) -> int:
        if self._fd is not None:
            return os.write(self._fd, payload)
        accepted = self._file.write(payload)
        # Non-blocking raw streams return None when nothing was accepted
        return 0 if accepted is None else int(accepted)

    def write_block(self, block: str, payload: bytes) -> int:
        """
        Write one encoded block.

        Returns:
            Number of bytes written (always ``len(payload)``)

        Raises:
            StreamWriteError: OS-level failure, closed or non-binary handle
            ShortWriteError: Stream accepted only part of the block
        """
        expected = len(payload)
        if expected == 0:
            return 0

        try:
            written = self._raw_write(payload)
        except (OSError, ValueError, TypeError) as e:
            WRITE_FAILURES.labels(block=block, reason="stream_error").inc()
            logger.warning("block_write_failed", block=block, size=expected, error=str(e))
            raise StreamWriteError(f"Failed to write {block} block: {e}") from e

        if written != expected:
            WRITE_FAILURES.labels(block=block, reason="short_write").inc()
            logger.warning(
                "block_short_write", block=block, size=expected, written=written
            )
            raise ShortWriteError(written, expected)

        BLOCKS_WRITTEN.labels(block=block).inc()
        BYTES_WRITTEN.labels(block=block).inc(written)
        logger.debug("block_written", block=block, size=written)
        return written


__all__ = ["OutputStream", "StreamLike"]
