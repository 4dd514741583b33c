"""
tests/test_execution_log_repository.py

ExecutionLogRepository against an in-memory SQLite database.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.execution_log import ExecutionLog
from app.errors import PersistenceError
from app.repositories.execution_log_repository import ExecutionLogRepository
from db.base import Base
from db.models import ExecutionLogRecord
from db.session import create_session_factory

_T0 = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def session_factory() -> sessionmaker[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return create_session_factory(engine)


def _log(task_name: str = "GetAll") -> ExecutionLog:
    return ExecutionLog(
        task_name=task_name,
        start_time=_T0,
        end_time=_T0 + timedelta(seconds=1.5),
        duration_seconds=1.5,
    )


def test_insert_returns_storage_assigned_ids(session_factory: sessionmaker[Session]) -> None:
    repository = ExecutionLogRepository(session_factory)

    first = repository.insert(_log("first"))
    second = repository.insert(_log("second"))

    assert first != second
    with session_factory() as session:
        rows = session.scalars(select(ExecutionLogRecord).order_by(ExecutionLogRecord.id)).all()
    assert [row.task_name for row in rows] == ["first", "second"]
    assert rows[0].duration_seconds == pytest.approx(1.5)
    assert rows[0].created_at is not None


def test_database_errors_become_persistence_errors(session_factory: sessionmaker[Session]) -> None:
    with session_factory() as session:
        Base.metadata.drop_all(session.get_bind())

    with pytest.raises(PersistenceError) as excinfo:
        ExecutionLogRepository(session_factory).insert(_log())

    assert isinstance(excinfo.value.__cause__, OperationalError)
