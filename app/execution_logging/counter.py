"""
app/execution_logging/counter.py

Thread-safe in-flight counter with a blocking wait-until-zero.
"""

from __future__ import annotations

import threading


class InFlightCounter:
    """
    Counts records between "accepted" and "persisted or reported".
    """

    def __init__(self) -> None:
        self._count = 0
        self._condition = threading.Condition()

    @property
    def value(self) -> int:
        with self._condition:
            return self._count

    def increment(self) -> None:
        with self._condition:
            self._count += 1

    def decrement(self) -> None:
        with self._condition:
            if self._count <= 0:
                raise RuntimeError("InFlightCounter decremented below zero.")
            self._count -= 1
            if self._count == 0:
                self._condition.notify_all()

    def wait_for_zero(self, timeout: float | None = None) -> bool:
        """
        Block until the count reaches zero; return False on timeout.
        """

        with self._condition:
            return self._condition.wait_for(lambda: self._count == 0, timeout=timeout)
