"""
app/execution_logging package.

Timing records flow from ``ExecutionTimer`` into ``ExecutionLogSink``, whose
worker thread persists them.
"""

from app.execution_logging.counter import InFlightCounter
from app.execution_logging.sink import ExecutionLogSink, SinkState
from app.execution_logging.timing import ExecutionTimer, TimedResult, TimingHandle, with_timing

__all__ = [
    "ExecutionLogSink",
    "ExecutionTimer",
    "InFlightCounter",
    "SinkState",
    "TimedResult",
    "TimingHandle",
    "with_timing",
]
