"""Structured concurrency helpers for running subprocess-bound work in parallel."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

from tqdm import tqdm

from .log_utils import logger


class ProgressReporter(Protocol):
    """Lightweight progress reporter abstraction."""

    def start(self, total: int) -> None: ...

    def increment(self) -> None: ...

    def close(self) -> None: ...


class TqdmProgressReporter:
    """Progress reporter backed by tqdm."""

    def __init__(self, desc: str, update_interval: float = 1.0) -> None:
        self._desc = desc
        self._update_interval = update_interval
        self._pbar: tqdm | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tick_handle: asyncio.TimerHandle | None = None

    def start(self, total: int) -> None:
        self._pbar = tqdm(
            total=total,
            desc=self._desc,
            smoothing=0,
            leave=False,
        )
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:  # pragma: no cover - sync callers
            self._loop = None
        if self._loop and self._update_interval > 0:
            self._schedule_tick()

    def _schedule_tick(self) -> None:
        if not self._loop or self._tick_handle is not None or self._pbar is None:
            return
        self._tick_handle = self._loop.call_later(self._update_interval, self._tick)

    def _tick(self) -> None:
        self._tick_handle = None
        if self._pbar is None:
            return
        self._pbar.refresh()
        if self._loop and self._update_interval > 0:
            self._schedule_tick()

    def increment(self) -> None:
        if self._pbar is not None:
            self._pbar.update(1)

    def close(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None
        self._loop = None


T = TypeVar("T")
R = TypeVar("R")


def first_error(group: BaseExceptionGroup) -> BaseException:
    """Return the earliest leaf exception recorded in a (possibly nested) group."""
    leading = group.exceptions[0]
    if isinstance(leading, BaseExceptionGroup):
        return first_error(leading)
    return leading


class FailFastExecutor:
    """Run one async job per item with bounded concurrency and fail-fast semantics.

    Jobs are launched in item order. The first job to raise cancels every
    sibling still queued or running; the executor only returns once all of
    them have unwound, then re-raises that first exception on its own rather
    than wrapped in an ``ExceptionGroup``.
    """

    def __init__(
        self,
        *,
        max_concurrency: int,
        progress_reporter: ProgressReporter | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._max_concurrency = max_concurrency
        self._progress = progress_reporter

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def map(self, fn: Callable[[T], Awaitable[R]], items: Sequence[T]) -> list[R]:
        """Execute `fn` for every item and return results in item order."""
        if not items:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)
        failed = asyncio.Event()

        async def run_one(item: T) -> R:
            async with semaphore:
                # A freed slot can wake a queued job before the group aborts.
                if failed.is_set():
                    raise asyncio.CancelledError
                try:
                    result = await fn(item)
                except Exception:
                    failed.set()
                    raise
            if self._progress:
                self._progress.increment()
            return result

        if self._progress:
            self._progress.start(len(items))
        tasks: list[asyncio.Task[R]] = []
        try:
            async with asyncio.TaskGroup() as tg:
                for item in items:
                    tasks.append(tg.create_task(run_one(item)))
        except ExceptionGroup as group:
            error = first_error(group)
            if len(group.exceptions) > 1:
                logger.debug(
                    f"Discarding {len(group.exceptions) - 1} additional failure(s) raised while aborting."
                )
            raise error from error.__cause__
        finally:
            if self._progress:
                self._progress.close()

        return [task.result() for task in tasks]


__all__ = [
    "FailFastExecutor",
    "ProgressReporter",
    "TqdmProgressReporter",
    "first_error",
]
