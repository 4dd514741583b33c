"""
app/domain package marker.
"""

from app.domain.execution_log import ExecutionLog
from app.domain.place import Place, PlacesPage

__all__ = [
    "ExecutionLog",
    "Place",
    "PlacesPage",
]
