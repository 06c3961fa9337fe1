"""Bounded-concurrency request scheduler.

Runs blocking request functions on a fixed-size thread pool so the
per-asteroid detail fan-out never has more than ``max_workers``
requests in flight.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Iterator, Optional, TypeVar, Union

from utils.constants import DEFAULT_MAX_CONCURRENCY

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class RequestScheduler:
    """Thread pool wrapper that caps simultaneous in-flight calls."""

    def __init__(self, max_workers: int = DEFAULT_MAX_CONCURRENCY):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="request",
                )
            return self._executor

    def map(
        self,
        fn: Callable[[T], R],
        items: Iterable[T],
    ) -> Iterator[tuple[T, Union[R, Exception]]]:
        """Call ``fn`` on every item, yielding results as they complete.

        Exceptions raised by ``fn`` are yielded in place of a result
        so one failing item never aborts the rest.
        """
        executor = self._get_executor()
        futures = {executor.submit(fn, item): item for item in items}
        for future in as_completed(futures):
            item = futures[future]
            try:
                yield item, future.result()
            except Exception as e:
                logger.debug("Scheduled call failed for %r: %s", item, e)
                yield item, e

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __enter__(self) -> "RequestScheduler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
