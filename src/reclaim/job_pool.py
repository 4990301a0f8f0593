"""Bounded-concurrency job pool.

Workers run on a thread pool and only ever return results. The thread that
calls ``submit`` and ``drain_all`` is the only one that touches the
counters or calls the fold function, so aggregation needs no locks.
"""

import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Generic, Optional, TypeVar

from reclaim.errors import ExecutionEnvironmentError
from reclaim.models import PoolProgress
from reclaim.progress import compute_eta

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class JobPool(Generic[T, R]):
    """
    Run ``worker(task)`` for each submitted task, at most ``max_concurrent``
    at a time.

    ``submit`` blocks while the pool is full, folding finished results to
    free a slot. ``drain_all`` blocks until every submitted task has been
    folded. Results arrive in completion order. There is no cancellation
    and no timeout: a worker that never returns keeps its slot.

    Args:
        worker: Function run on a pool thread for each task
        fold: Called on the submitting thread once per task with
            ``(task, result)``; result is None if the worker raised
        max_concurrent: Capacity of the pool
        total: Number of tasks the caller intends to submit (for progress)
        phase: Name reported in PoolProgress
        label: Turns a task into a short string for the active-items list
        on_progress: Called with a PoolProgress after every submit and
            every folded result
    """

    def __init__(
        self,
        worker: Callable[[T], R],
        fold: Callable[[T, Optional[R]], None],
        max_concurrent: int,
        total: int = 0,
        phase: str = "pool",
        label: Callable[[T], str] = str,
        on_progress: Callable[[PoolProgress], None] | None = None,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self.max_concurrent = max_concurrent
        self.total = total
        self.phase = phase
        self.submitted_count = 0
        self.completed_count = 0
        self.peak_active = 0

        self._worker = worker
        self._fold = fold
        self._label = label
        self._on_progress = on_progress
        self._active: dict[Future, T] = {}
        self._started_at = time.monotonic()

        try:
            self._executor = ThreadPoolExecutor(
                max_workers=max_concurrent, thread_name_prefix=f"reclaim-{phase}"
            )
        except RuntimeError as e:
            raise ExecutionEnvironmentError(f"Cannot create worker pool: {e}") from e

    def __enter__(self) -> "JobPool[T, R]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.drain_all()
            self.shutdown()
        else:
            # Interrupted: queued work is dropped, running workers are left to finish
            self.shutdown(wait=False)

    @property
    def active_count(self) -> int:
        """Number of tasks currently in flight."""
        return len(self._active)

    def submit(self, task: T) -> None:
        """Start ``task`` on a free worker, waiting for a slot if needed."""
        while len(self._active) >= self.max_concurrent:
            self._drain_step()

        try:
            future = self._executor.submit(self._worker, task)
        except RuntimeError as e:
            raise ExecutionEnvironmentError(f"Cannot start worker: {e}") from e

        self._active[future] = task
        self.submitted_count += 1
        self.peak_active = max(self.peak_active, len(self._active))
        self._notify()

    def drain_all(self) -> None:
        """Block until every submitted task has been folded."""
        while self._active:
            self._drain_step()

    def shutdown(self, wait: bool = True) -> None:
        """Release the worker threads, optionally without waiting for them."""
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def snapshot(self) -> PoolProgress:
        """Current counters as a PoolProgress."""
        elapsed = time.monotonic() - self._started_at
        return PoolProgress(
            phase=self.phase,
            total=self.total,
            submitted=self.submitted_count,
            completed=self.completed_count,
            active=[self._label(task) for task in self._active.values()],
            elapsed_seconds=elapsed,
            eta_seconds=compute_eta(self.total, self.completed_count, elapsed),
        )

    def _drain_step(self) -> None:
        """Wait for at least one worker to finish, then fold every finished one."""
        done, _ = wait(list(self._active), return_when=FIRST_COMPLETED)

        for future in done:
            task = self._active.pop(future)
            try:
                result = future.result()
            except Exception:
                log.exception("Worker for %s failed in %s phase", self._label(task), self.phase)
                result = None

            self.completed_count += 1
            self._fold(task, result)
            self._notify()

    def _notify(self) -> None:
        if self._on_progress:
            self._on_progress(self.snapshot())
