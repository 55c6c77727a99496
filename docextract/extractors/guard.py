"""
Size and deadline guards around the extraction pipeline.

The size check runs before any parsing. The deadline races the whole
pipeline; on expiry the in-flight work is abandoned, not cancelled.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from typing import Callable, TypeVar

from docextract.errors import OversizedInput, TimedOut

T = TypeVar("T")


def check_size(data: bytes, limit: int) -> None:
    """Reject inputs over ``limit`` bytes."""
    if len(data) > limit:
        raise OversizedInput(len(data), limit)


def run_with_deadline(fn: Callable[[], T], timeout_seconds: float) -> T:
    """
    Run ``fn`` on a worker thread and wait at most ``timeout_seconds``.

    Raises:
        TimedOut: If ``fn`` hasn't returned in time
    """
    # One executor per call: no state shared between extractions
    executor = concurrent.futures.ThreadPoolExecutor(
        max_workers=1, thread_name_prefix="docextract"
    )
    try:
        future = executor.submit(fn)
        try:
            return future.result(timeout=timeout_seconds)
        except concurrent.futures.TimeoutError:
            raise TimedOut(f"Extraction exceeded {timeout_seconds:g}s deadline") from None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


async def run_with_deadline_async(fn: Callable[[], T], timeout_seconds: float) -> T:
    """Async variant of run_with_deadline using a worker thread."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise TimedOut(f"Extraction exceeded {timeout_seconds:g}s deadline") from None
