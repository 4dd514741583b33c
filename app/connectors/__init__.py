"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector
from app.connectors.places_connector import PlacesConnector

__all__ = [
    "BaseConnector",
    "PlacesConnector",
]
