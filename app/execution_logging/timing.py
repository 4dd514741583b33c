"""
app/execution_logging/timing.py

Wall-clock timing of synchronous actions, reported to the execution-log sink.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Generic, Protocol, TypeVar

from app.domain.execution_log import ExecutionLog
from app.errors import SinkClosedError, SinkFullError

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ExecutionLogQueue(Protocol):
    def enqueue(self, record: ExecutionLog) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TimedResult(Generic[R]):
    """
    Return value of a timed action together with its timing record.
    """

    value: R
    log: ExecutionLog


class TimingHandle:
    """
    Filled in by ``ExecutionTimer.measure`` once the block exits.
    """

    def __init__(self, task_name: str) -> None:
        self.task_name = task_name
        self.log: ExecutionLog | None = None


class ExecutionTimer:
    """
    Measures actions and pushes one ``ExecutionLog`` per action onto the sink.

    The action runs on the caller's thread. A record is produced whether the
    action returns or raises; the action's exception is re-raised unchanged.
    """

    def __init__(
        self,
        sink: ExecutionLogQueue,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sink = sink
        self._clock = clock

    @contextmanager
    def measure(self, task_name: str) -> Iterator[TimingHandle]:
        """
        Time the ``with`` block and enqueue its record on exit.

        When the block raises, a sink rejection is logged and the block's own
        exception propagates; otherwise the rejection itself is raised.
        """

        handle = TimingHandle(task_name)
        start_time = self._clock()
        started = time.perf_counter()
        try:
            yield handle
        except BaseException:
            try:
                self._emit(handle, start_time, started)
            except (SinkClosedError, SinkFullError) as exc:
                logger.error("Execution log lost for failed task_name=%s error=%s", task_name, exc)
            raise
        self._emit(handle, start_time, started)

    def _emit(self, handle: TimingHandle, start_time: datetime, started: float) -> None:
        duration = max(0.0, time.perf_counter() - started)
        # The wall clock may step backwards; the monotonic duration wins.
        end_time = max(self._clock(), start_time + timedelta(seconds=duration))
        handle.log = ExecutionLog(
            task_name=handle.task_name,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=duration,
        )
        self._sink.enqueue(handle.log)

    def run(self, task_name: str, action: Callable[[], R]) -> TimedResult[R]:
        """
        Run ``action`` synchronously and return its value with the timing record.
        """

        with self.measure(task_name) as handle:
            value = action()
        if handle.log is None:
            raise RuntimeError(f"No timing record was produced for task_name={task_name}.")
        return TimedResult(value=value, log=handle.log)


def with_timing(task_name: str, action: Callable[[], object], *, sink: ExecutionLogQueue) -> ExecutionLog:
    """
    Time ``action`` and enqueue the record; return the record.
    """

    return ExecutionTimer(sink).run(task_name, action).log
