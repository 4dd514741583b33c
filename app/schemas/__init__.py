"""
app/schemas package marker.
"""

from app.schemas.health import ErrorResponse, HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
]
