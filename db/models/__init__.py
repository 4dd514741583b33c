"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.execution_log import ExecutionLogRecord

__all__ = [
    "ExecutionLogRecord",
]
