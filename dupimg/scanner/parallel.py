"""
Parallel processing module for the scanner package.

Runs one unit of work per item on a bounded thread pool and feeds each
result to a progress sink through a queue drained by a dedicated thread, so a
slow callback never holds up the workers.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from typing import Callable, Iterable, Optional, TypeVar

from ..config import DEFAULT_WORKERS, MAX_WORKERS

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

_DONE = object()


def bounded_workers(max_workers: Optional[int]) -> int:
    """Clamp a requested worker count into [1, MAX_WORKERS]."""
    if max_workers is None:
        max_workers = DEFAULT_WORKERS
    return max(1, min(int(max_workers), MAX_WORKERS))


class ProgressSink:
    """
    Non-blocking progress channel.

    ``put`` only enqueues; a single consumer thread invokes the callback.
    Callback exceptions are logged and dropped.
    """

    def __init__(self, callback: Callable[[R], None]):
        self._callback = callback
        self._queue: queue.Queue = queue.Queue()
        self._thread = threading.Thread(target=self._drain, name="dupimg-progress", daemon=True)

    def __enter__(self) -> 'ProgressSink':
        self._thread.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._queue.put(_DONE)
        self._thread.join()

    def put(self, item: R) -> None:
        self._queue.put(item)

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            if item is _DONE:
                return
            try:
                self._callback(item)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")


def run_parallel(
    items: Iterable[T],
    worker: Callable[[T], R],
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[R], None]] = None,
) -> list[R]:
    """
    Apply ``worker`` to every item on a bounded thread pool.

    Args:
        items: Work items
        worker: Function run once per item; must not raise for per-item failures
        max_workers: Requested pool size (clamped to a multiple of CPU count)
        progress_callback: Optional callback(result), invoked asynchronously
            after each item completes

    Returns:
        Results in completion order, after all work has joined
    """
    results: list[R] = []
    workers = bounded_workers(max_workers)

    sink: Optional[ProgressSink] = ProgressSink(progress_callback) if progress_callback else None

    with sink if sink is not None else nullcontext():
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(worker, item) for item in items]

            for future in as_completed(futures):
                result = future.result()
                results.append(result)
                if sink is not None:
                    sink.put(result)

    return results


__all__ = ['ProgressSink', 'bounded_workers', 'run_parallel']
