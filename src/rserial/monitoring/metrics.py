"""Prometheus metrics for the rserial encoder."""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    generate_latest,
)

# Counters
BYTES_WRITTEN = Counter(
    "rserial_bytes_written_total", "Total bytes written to output streams", ["block"]
)
BLOCKS_WRITTEN = Counter(
    "rserial_blocks_written_total", "Number of encoded blocks written", ["block"]
)
WRITE_FAILURES = Counter(
    "rserial_write_failures_total",
    "Block writes that failed or were cut short",
    ["block", "reason"],
)

__all__ = [
    "BYTES_WRITTEN",
    "BLOCKS_WRITTEN",
    "WRITE_FAILURES",
    "CONTENT_TYPE_LATEST",
    "generate_latest",
]
