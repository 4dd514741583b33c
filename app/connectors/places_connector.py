"""
app/connectors/places_connector.py

Paginated places API connector.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import PlacesAPISettings
from app.connectors.base import BaseConnector
from app.domain.place import Place, PlacesPage
from app.errors import UpstreamFetchError

logger = logging.getLogger(__name__)

_STRING_FIELDS = ("title", "slug", "address", "phone", "subway", "location")


class PlacesConnector(BaseConnector):
    """
    Walks ``{base_url}?page=n`` from the configured start page until the
    upstream reports no next page, collecting every result in order.
    """

    def __init__(
        self,
        *,
        settings: PlacesAPISettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="places",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        self._settings = settings

    def fetch_all_places(self) -> list[Place]:
        """
        Fetch every page and return the concatenated places.

        Any failure aborts the whole walk with ``UpstreamFetchError``; no
        partial list is returned.
        """

        places: list[Place] = []
        page_number = self._settings.start_page
        pages_fetched = 0
        while True:
            page = self.fetch_page(page_number)
            pages_fetched += 1
            places.extend(page.results)
            if not page.has_next:
                break
            page_number += 1

        logger.info(
            "Places fetch completed source=%s start_page=%s pages=%s places=%s",
            self.source,
            self._settings.start_page,
            pages_fetched,
            len(places),
        )
        return places

    def fetch_page(self, page_number: int) -> PlacesPage:
        """
        Fetch and decode one listing page.
        """

        logger.debug("Fetching places page source=%s page=%s", self.source, page_number)
        payload = self._request_json(
            url=self._settings.base_url,
            params={"page": page_number},
            page=page_number,
        )
        return self._parse_page(payload, page_number)

    def _parse_page(self, payload: Any, page_number: int) -> PlacesPage:
        if not isinstance(payload, dict):
            raise UpstreamFetchError(
                f"{self.source}: page {page_number} is not a JSON object.",
                page=page_number,
            )

        raw_results = payload.get("results")
        if raw_results is None:
            raw_results = []
        if not isinstance(raw_results, list):
            raise UpstreamFetchError(
                f"{self.source}: page {page_number} 'results' is not a list.",
                page=page_number,
            )

        results = [self._normalize_place(item, page_number, index) for index, item in enumerate(raw_results)]

        next_url = payload.get("next")
        return PlacesPage(
            page=page_number,
            results=results,
            next=str(next_url) if next_url else None,
        )

    def _normalize_place(self, item: Any, page_number: int, index: int) -> Place:
        if not isinstance(item, dict):
            raise UpstreamFetchError(
                f"{self.source}: page {page_number} result {index} is not an object.",
                page=page_number,
            )

        raw_id = item.get("id")
        if raw_id is None:
            raise UpstreamFetchError(
                f"{self.source}: page {page_number} result {index} has no id.",
                page=page_number,
            )
        # bool is an int subclass; floats and numeric strings are not ids
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            raise UpstreamFetchError(
                f"{self.source}: page {page_number} result {index} has invalid id {raw_id!r}.",
                page=page_number,
            )

        is_closed = item.get("is_closed")
        if is_closed is None:
            is_closed = False
        elif not isinstance(is_closed, bool):
            raise UpstreamFetchError(
                f"{self.source}: page {page_number} result {index} has invalid is_closed {is_closed!r}.",
                page=page_number,
            )

        strings = {name: _as_text(item.get(name)) for name in _STRING_FIELDS}
        return Place(id=raw_id, is_closed=is_closed, **strings)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
