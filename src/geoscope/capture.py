"""Capture of engine diagnostics written to the process's stderr.

Database engines report open failures as free text on file descriptor 2
instead of returning them. While an open call runs, fd 2 is pointed at a
pipe and ``sys.stderr`` at a buffer, and whatever lands in either is handed
back to the caller, Python-level text first.

Redirecting fd 2 affects the whole process, so only one capture can be in
flight at a time. Both pipe ends are non-blocking: output beyond the pipe's
capacity is dropped by the writer and reads never wait.
"""

from __future__ import annotations

import io
import logging
import os
import sys
import threading
from contextlib import contextmanager, redirect_stderr
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)

STDERR_FD = 2
DEFAULT_LIMIT = 4096

_capture_lock = threading.Lock()


@dataclass
class CapturedOutput:
    """Text collected during a capture; filled in when the block exits."""

    text: str = ""
    truncated: bool = False


def _flush_stderr() -> None:
    if sys.stderr is None:
        return
    try:
        sys.stderr.flush()
    except (OSError, ValueError):
        pass


def _drain(fd: int, limit: int) -> tuple[bytes, bool]:
    """Read up to ``limit`` bytes from a non-blocking fd."""
    chunks: list[bytes] = []
    remaining = limit
    while remaining > 0:
        try:
            chunk = os.read(fd, remaining)
        except BlockingIOError:
            return b"".join(chunks), False
        if not chunk:
            return b"".join(chunks), False
        chunks.append(chunk)
        remaining -= len(chunk)
    # Limit reached; anything still queued is discarded with the pipe
    try:
        truncated = bool(os.read(fd, 1))
    except BlockingIOError:
        truncated = False
    return b"".join(chunks), truncated


@contextmanager
def capture_stderr(limit: int = DEFAULT_LIMIT) -> Iterator[CapturedOutput]:
    """Redirect fd 2 and ``sys.stderr`` for the duration of the block.

    Usage:
        with capture_stderr() as captured:
            handle = engine.open_path(path, mode)
        captured.text  # diagnostics, "" when there were none
    """
    captured = CapturedOutput()
    with _capture_lock:
        _flush_stderr()
        try:
            saved_fd = os.dup(STDERR_FD)
        except OSError:
            logger.debug("stderr is not open; running without capture")
            yield captured
            return

        read_fd, write_fd = os.pipe()
        os.set_blocking(read_fd, False)
        os.set_blocking(write_fd, False)
        buffer = io.StringIO()
        try:
            os.dup2(write_fd, STDERR_FD)
            try:
                with redirect_stderr(buffer):
                    yield captured
            finally:
                _flush_stderr()
                data, truncated = _drain(read_fd, limit)
                data = buffer.getvalue().encode("utf-8", errors="replace") + data
                captured.truncated = truncated or len(data) > limit
                data = data[:limit]
                captured.text = data.decode("utf-8", errors="replace").strip()
        finally:
            os.dup2(saved_fd, STDERR_FD)
            os.close(saved_fd)
            os.close(read_fd)
            os.close(write_fd)

    if captured.truncated:
        logger.debug("engine diagnostics truncated to %d bytes", limit)
