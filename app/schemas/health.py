"""
app/schemas/health.py

Response schemas for service status and error bodies.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Liveness payload including execution-log backlog.
    """

    status: str
    execution_log_sink: str
    pending_execution_logs: int = Field(..., ge=0)


class ErrorResponse(BaseModel):
    """
    Body returned for every failed request.
    """

    detail: str
