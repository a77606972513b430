# ytt/batch/base.py
"""
Shared definitions for playlist batch processing.

This module defines:
- The per-video handler contract
- A lightweight timer for consistent execution_time_ms measurement

No business logic belongs here.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, TypeAlias


VideoHandler: TypeAlias = Callable[[str, int, int], Awaitable[None]]
"""
Type alias for per-video handlers.

Signature:
    await handler(video_id: str, index: int, total: int) -> None

index is 1-based. A handler signals failure by raising a TranscriptError.
"""


@contextmanager
def timer() -> Iterator[Callable[[], float]]:
    """
    Context manager that provides an end() function returning elapsed milliseconds.

    Usage:
        with timer() as end:
            await handler(...)
        execution_time_ms = end()
    """
    start = time.perf_counter()

    def end() -> float:
        return (time.perf_counter() - start) * 1000

    yield end
