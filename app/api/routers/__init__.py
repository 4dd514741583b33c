"""
app/api/routers package marker.
"""

from app.api.routers.places import router as places_router

__all__ = [
    "places_router",
]
