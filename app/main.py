from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from sqlalchemy.engine import Engine

from app.api.dependencies import get_execution_log_sink
from app.config import AppSettings
from app.connectors.places_connector import PlacesConnector
from app.domain.execution_log import ExecutionLog
from app.execution_logging import ExecutionLogSink, ExecutionTimer
from app.repositories.execution_log_repository import ExecutionLogRepository
from app.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

SHUTDOWN_DRAIN_TIMEOUT_SECONDS: float | None = None


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, log_level.strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: AppSettings,
    *,
    engine: Engine | None = None,
    places_connector: PlacesConnector | None = None,
    log_store: Callable[[ExecutionLog], object] | None = None,
) -> FastAPI:
    """
    Create and wire the FastAPI application.

    Without ``log_store`` execution logs go to PostgreSQL through
    ``ExecutionLogRepository`` on ``engine`` (built from settings when not
    given). Connectivity is checked by the caller before serving.
    """

    if log_store is None:
        from db.session import create_db_engine, create_session_factory

        if engine is None:
            engine = create_db_engine(settings.database, settings.pool)
        repository = ExecutionLogRepository(create_session_factory(engine))
        log_store = repository.insert

    sink = ExecutionLogSink(
        log_store,
        capacity=settings.execution_log.queue_size,
        enqueue_timeout_seconds=settings.execution_log.enqueue_timeout_seconds,
    )
    connector = places_connector or PlacesConnector(settings=settings.places_api)

    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        """Start the log worker on boot; close then drain on exit."""
        sink.start()
        try:
            yield
        finally:
            sink.shutdown(timeout=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)
            connector.close()
            if engine is not None:
                engine.dispose()
            logger.info("Server shut down")

    application = FastAPI(
        title="Places Proxy API",
        version="1.0.0",
        lifespan=_lifespan,
    )
    application.state.settings = settings
    application.state.places_connector = connector
    application.state.execution_log_sink = sink
    application.state.execution_timer = ExecutionTimer(sink)

    from app.api.routers import places_router

    application.include_router(places_router)

    @application.get("/health")
    def healthcheck(log_sink: ExecutionLogSink = Depends(get_execution_log_sink)) -> HealthResponse:
        return HealthResponse(
            status="ok",
            execution_log_sink=log_sink.state.value,
            pending_execution_logs=log_sink.pending,
        )

    return application
