"""
app/repositories/execution_log_repository.py

DB persistence for execution timing records.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.execution_log import ExecutionLog
from app.errors import PersistenceError
from db.models.execution_log import ExecutionLogRecord


class ExecutionLogRepository:
    """
    Writes one ``execution_logs`` row per record, each in its own session.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, record: ExecutionLog) -> int:
        """
        Insert the record and return the id assigned by the database.
        """

        row = ExecutionLogRecord(
            task_name=record.task_name,
            start_time=record.start_time,
            end_time=record.end_time,
            duration_seconds=record.duration_seconds,
        )
        with self._session_factory() as session:
            try:
                session.add(row)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise PersistenceError(
                    f"Failed to insert execution log task_name={record.task_name}: {exc}"
                ) from exc
            return row.id
