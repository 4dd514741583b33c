"""
app/domain/execution_log.py

Timing record produced by the execution timer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ExecutionLog:
    """
    Wall-clock timing of one logical operation.

    ``id`` stays ``None`` until storage assigns one.
    """

    task_name: str
    start_time: datetime
    end_time: datetime
    duration_seconds: float
    id: int | None = None
