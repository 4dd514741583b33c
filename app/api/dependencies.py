"""
app/api/dependencies.py

Shared FastAPI dependencies resolving the components built in ``create_app``.
"""

from __future__ import annotations

from fastapi import Request

from app.connectors.places_connector import PlacesConnector
from app.execution_logging import ExecutionLogSink, ExecutionTimer


def get_places_connector(request: Request) -> PlacesConnector:
    return request.app.state.places_connector


def get_execution_timer(request: Request) -> ExecutionTimer:
    return request.app.state.execution_timer


def get_execution_log_sink(request: Request) -> ExecutionLogSink:
    return request.app.state.execution_log_sink
