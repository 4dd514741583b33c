"""
app/repositories package marker.
"""

from app.repositories.execution_log_repository import ExecutionLogRepository

__all__ = [
    "ExecutionLogRepository",
]
