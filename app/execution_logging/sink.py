"""
app/execution_logging/sink.py

Asynchronous execution-log sink: a bounded queue drained by one worker thread.

Lifecycle
----------
``start()`` launches the worker. ``enqueue()`` is accepted only while the
sink is RUNNING. ``shutdown()`` closes the queue first, then waits for the
in-flight count to reach zero, then joins the worker. Close-then-drain
ordering guarantees every accepted record is persisted or reported before
shutdown returns. Records still queued when the process is killed are lost.

Queue-full policy
------------------
With ``enqueue_timeout_seconds=None`` a full queue blocks the producer, which
couples request latency to storage throughput. With a timeout the producer
waits at most that long and then gets ``SinkFullError``.
"""

from __future__ import annotations

import enum
import logging
import queue
import threading
from collections.abc import Callable

from app.domain.execution_log import ExecutionLog
from app.errors import PersistenceError, SinkClosedError, SinkFullError
from app.execution_logging.counter import InFlightCounter

logger = logging.getLogger(__name__)

StoreFn = Callable[[ExecutionLog], object]

_STOP = object()


class SinkState(str, enum.Enum):
    RUNNING = "running"
    CLOSED = "closed"


class ExecutionLogSink:
    """
    Fire-and-forget persistence of ``ExecutionLog`` records.
    """

    def __init__(
        self,
        store: StoreFn,
        *,
        capacity: int = 100,
        enqueue_timeout_seconds: float | None = None,
    ) -> None:
        self._store = store
        self._capacity = max(1, capacity)
        self._queue: queue.Queue[object] = queue.Queue(maxsize=self._capacity)
        self._enqueue_timeout_seconds = enqueue_timeout_seconds
        self._in_flight = InFlightCounter()
        self._state = SinkState.RUNNING
        self._producer_lock = threading.Lock()
        self._worker: threading.Thread | None = None

    @property
    def state(self) -> SinkState:
        return self._state

    @property
    def pending(self) -> int:
        return self._in_flight.value

    @property
    def capacity(self) -> int:
        return self._capacity

    def start(self) -> None:
        if self._worker is not None:
            return
        self._worker = threading.Thread(
            target=self._run,
            name="execution-log-writer",
            daemon=True,
        )
        self._worker.start()
        logger.info("Execution log sink started capacity=%s", self._capacity)

    def enqueue(self, record: ExecutionLog) -> None:
        """
        Hand a record to the worker.

        Raises ``SinkClosedError`` once the sink is closed and
        ``SinkFullError`` when a configured enqueue timeout expires.
        """

        # Producers are serialized so the stop marker always lands behind
        # every accepted record.
        with self._producer_lock:
            if self._state is not SinkState.RUNNING:
                raise SinkClosedError(
                    f"Execution log sink is closed; rejected task_name={record.task_name}."
                )
            self._in_flight.increment()
            try:
                self._queue.put(record, timeout=self._enqueue_timeout_seconds)
            except queue.Full as exc:
                self._in_flight.decrement()
                raise SinkFullError(
                    f"Execution log queue full after {self._enqueue_timeout_seconds}s; "
                    f"rejected task_name={record.task_name}."
                ) from exc

    def close(self) -> None:
        """
        Stop accepting records. Already queued records are still written.

        Expects a started worker; the stop marker waits for a free slot.
        """

        with self._producer_lock:
            if self._state is SinkState.CLOSED:
                return
            self._state = SinkState.CLOSED
            self._queue.put(_STOP)
        logger.info("Execution log sink closed pending=%s", self._in_flight.value)

    def wait_drained(self, timeout: float | None = None) -> bool:
        return self._in_flight.wait_for_zero(timeout=timeout)

    def shutdown(self, timeout: float | None = None) -> bool:
        """
        Close, wait for every accepted record, then stop the worker.

        Returns False if the drain did not finish within ``timeout``.
        """

        self.close()
        drained = self.wait_drained(timeout=timeout)
        if self._worker is not None:
            self._worker.join(timeout=timeout)
        if drained:
            logger.info("Execution log sink drained")
        else:
            logger.warning("Execution log sink drain timed out pending=%s", self._in_flight.value)
        return drained

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self._write(item)  # type: ignore[arg-type]

    def _write(self, record: ExecutionLog) -> None:
        try:
            self._store(record)
        except PersistenceError as exc:
            logger.error(
                "Execution log dropped task_name=%s error=%s",
                record.task_name,
                exc,
            )
        except Exception:
            logger.exception("Unexpected execution log writer failure task_name=%s", record.task_name)
        finally:
            self._in_flight.decrement()
