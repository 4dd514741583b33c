"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class BaseConnector:
    """
    Shared outbound HTTP behavior for upstream APIs.

    Requests are sent once: no retries and no backoff. Every response body
    is released before the call returns, whether decoding succeeded or not.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def close(self) -> None:
        self._session.close()

    def _request_json(
        self,
        *,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        page: int | None = None,
    ) -> Any:
        """
        Execute a GET request and return the parsed JSON body.
        """

        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = self._session.get(
                url,
                params=params,
                headers=request_headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.error(
                "Connector request failed source=%s page=%s url=%s error=%s",
                self.source,
                page,
                url,
                exc,
            )
            raise UpstreamFetchError(f"{self.source}: request failed: {exc}", page=page) from exc

        with response:
            try:
                response.raise_for_status()
            except requests.HTTPError as exc:
                logger.error(
                    "Connector request rejected source=%s page=%s status=%s url=%s",
                    self.source,
                    page,
                    response.status_code,
                    url,
                )
                raise UpstreamFetchError(
                    f"{self.source}: upstream returned HTTP {response.status_code}",
                    page=page,
                ) from exc

            try:
                return response.json()
            except (ValueError, requests.RequestException) as exc:
                logger.error(
                    "Connector response was not valid JSON source=%s page=%s url=%s",
                    self.source,
                    page,
                    url,
                )
                raise UpstreamFetchError(
                    f"{self.source}: response was not valid JSON.",
                    page=page,
                ) from exc
