"""
app/domain/place.py

Domain models for places fetched from the upstream API.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Place:
    """
    One venue record as returned by the places API.
    """

    id: int
    title: str = ""
    slug: str = ""
    address: str = ""
    phone: str = ""
    subway: str = ""
    is_closed: bool = False
    location: str = ""


@dataclass(frozen=True)
class PlacesPage:
    """
    One decoded page of the upstream listing.
    """

    page: int
    results: list[Place] = field(default_factory=list)
    next: str | None = None

    @property
    def has_next(self) -> bool:
        return bool(self.next)
