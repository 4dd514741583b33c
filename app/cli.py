"""
app/cli.py

Process entry point: load the env file, check the database, serve on port 8080.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from app.config import LISTEN_HOST, LISTEN_PORT, load_settings
from app.errors import ConfigError, DatabaseConnectionError

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve the places proxy API.")
    parser.add_argument(
        "--env",
        dest="env_path",
        default=".env",
        help="Path to the env file with DB_* settings.",
    )
    args = parser.parse_args(argv)

    from app.main import configure_logging, create_app

    try:
        settings = load_settings(args.env_path)
    except ConfigError as exc:
        configure_logging()
        logger.critical("Configuration initialisation failed: %s", exc)
        return 1

    configure_logging(settings.log_level)

    import uvicorn

    from db import session as db_session

    engine = db_session.create_db_engine(settings.database, settings.pool)
    try:
        db_session.check_connection(engine)
    except DatabaseConnectionError as exc:
        engine.dispose()
        logger.critical("Database connection failed: %s", exc)
        return 1

    application = create_app(settings, engine=engine)
    uvicorn.run(
        application,
        host=LISTEN_HOST,
        port=LISTEN_PORT,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
