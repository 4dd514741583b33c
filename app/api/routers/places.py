"""
app/api/routers/places.py

Places listing endpoint: fetch every upstream page, re-serialize, respond.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.dependencies import get_execution_timer, get_places_connector
from app.connectors.places_connector import PlacesConnector
from app.domain.place import Place
from app.errors import (
    SerializationError,
    SinkClosedError,
    SinkFullError,
    UnsupportedFormatError,
    UpstreamFetchError,
)
from app.execution_logging import ExecutionTimer
from app.schemas.health import ErrorResponse
from app.serializers import DEFAULT_FORMAT, get_serializer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["places"])

GET_ALL_TASK_NAME = "GetAll"


@router.get(
    "/all",
    response_class=Response,
    responses={
        200: {
            "content": {"application/json": {}, "application/octet-stream": {}},
            "description": "Every place, encoded in the requested format.",
        },
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
def get_all(
    format: str | None = Query(
        default=None,
        description="Output format: json (default) or gob.",
    ),
    connector: PlacesConnector = Depends(get_places_connector),
    timer: ExecutionTimer = Depends(get_execution_timer),
) -> Response:
    """
    Return all upstream places serialized in the requested format.

    The fetch and the encoding are timed together as one ``GetAll`` record.
    """

    requested_format = DEFAULT_FORMAT.value if format is None else format

    try:
        with timer.measure(GET_ALL_TASK_NAME):
            serializer = get_serializer(requested_format, Place)
            places = connector.fetch_all_places()
            payload = serializer.serialize(places)
    except UnsupportedFormatError as exc:
        logger.warning("Rejected places request format=%r", exc.format)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except UpstreamFetchError as exc:
        logger.warning("Places request failed upstream page=%s error=%s", exc.page, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    except SerializationError as exc:
        logger.error("Places request failed to serialize format=%s error=%s", requested_format, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except (SinkClosedError, SinkFullError) as exc:
        logger.warning("Places request could not record timing error=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return Response(content=payload, media_type=serializer.media_type)
