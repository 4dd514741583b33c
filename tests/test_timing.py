"""
tests/test_timing.py

ExecutionTimer produces well-formed records and never hides failures.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.execution_log import ExecutionLog
from app.errors import SinkClosedError
from app.execution_logging import ExecutionTimer, with_timing


class ListQueue:
    def __init__(self) -> None:
        self.records: list[ExecutionLog] = []

    def enqueue(self, record: ExecutionLog) -> None:
        self.records.append(record)


def test_record_has_non_negative_duration_and_ordered_timestamps() -> None:
    queue = ListQueue()

    record = with_timing("t", lambda: time.sleep(0.01), sink=queue)

    assert record.task_name == "t"
    assert record.duration_seconds >= 0
    assert record.end_time >= record.start_time
    assert record.id is None
    assert queue.records == [record]


def test_run_returns_action_value_with_record() -> None:
    queue = ListQueue()

    result = ExecutionTimer(queue).run("compute", lambda: 21 * 2)

    assert result.value == 42
    assert result.log is queue.records[0]


def test_failing_action_is_reraised_and_still_timed() -> None:
    queue = ListQueue()

    def explode() -> None:
        raise ValueError("action failed")

    with pytest.raises(ValueError, match="action failed"):
        ExecutionTimer(queue).run("explode", explode)

    assert [record.task_name for record in queue.records] == ["explode"]


def test_measure_fills_handle_after_block() -> None:
    queue = ListQueue()
    timer = ExecutionTimer(queue)

    with timer.measure("block") as handle:
        assert handle.log is None

    assert handle.log is not None
    assert handle.log.task_name == "block"


def test_backwards_wall_clock_still_yields_ordered_timestamps() -> None:
    queue = ListQueue()
    ticks = iter(
        [
            datetime(2026, 10, 18, 12, 0, 5, tzinfo=timezone.utc),
            datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc),
        ]
    )

    result = ExecutionTimer(queue, clock=lambda: next(ticks)).run("skew", lambda: None)

    assert result.log.end_time >= result.log.start_time
    assert result.log.end_time - result.log.start_time <= timedelta(seconds=1)


class ClosedQueue:
    def enqueue(self, record: ExecutionLog) -> None:
        raise SinkClosedError(f"Execution log sink is closed; rejected task_name={record.task_name}.")


def test_sink_rejection_does_not_mask_action_failure(caplog: pytest.LogCaptureFixture) -> None:
    def explode() -> None:
        raise ValueError("action failed")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(ValueError, match="action failed"):
            ExecutionTimer(ClosedQueue()).run("explode", explode)

    assert "Execution log lost for failed task_name=explode" in caplog.text


def test_sink_rejection_after_success_is_raised() -> None:
    with pytest.raises(SinkClosedError):
        ExecutionTimer(ClosedQueue()).run("compute", lambda: 1)
