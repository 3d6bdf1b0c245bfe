"""
Monitoring utilities for rserial.
"""

from rserial.monitoring.metrics import (
    BLOCKS_WRITTEN,
    BYTES_WRITTEN,
    CONTENT_TYPE_LATEST,
    WRITE_FAILURES,
    generate_latest,
)

__all__ = [
    "BYTES_WRITTEN",
    "BLOCKS_WRITTEN",
    "WRITE_FAILURES",
    "CONTENT_TYPE_LATEST",
    "generate_latest",
]
