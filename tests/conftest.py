import io
import os
import sys
from pathlib import Path
from typing import Iterator, List, Tuple

import pytest

# Ensure src/ and tests/ are on sys.path for local test runs without installation
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
TESTS_DIR = PROJECT_ROOT / "tests"
for path in (SRC_DIR, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that touch real file descriptors or the CLI",
    )


class RecordingSink:
    """Binary sink that records every write call and can accept only part of it."""

    def __init__(self, accept_limit: int = -1) -> None:
        self.accept_limit = accept_limit
        self.calls: List[bytes] = []
        self.buffer = bytearray()

    def write(self, data: bytes) -> int:
        self.calls.append(bytes(data))
        accepted = data if self.accept_limit < 0 else data[: self.accept_limit]
        self.buffer += accepted
        return len(accepted)


class FailingSink:
    """Binary sink whose writes always fail at the OS level."""

    def __init__(self) -> None:
        self.attempts = 0

    def write(self, data: bytes) -> int:
        self.attempts += 1
        raise OSError(28, "No space left on device")


@pytest.fixture
def out() -> io.BytesIO:
    """In-memory binary output stream."""
    return io.BytesIO()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def short_sink() -> RecordingSink:
    """Sink that accepts at most 5 bytes per write."""
    return RecordingSink(accept_limit=5)


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def pipe_fds() -> Iterator[Tuple[int, int]]:
    """OS pipe (read_fd, write_fd); both ends closed afterwards if still open."""
    r, w = os.pipe()
    try:
        yield r, w
    finally:
        for fd in (r, w):
            try:
                os.close(fd)
            except OSError:
                pass
