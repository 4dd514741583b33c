"""
app/config.py

Application configuration loaded once at startup from an env file.

The settings object is built by ``load_settings`` and passed explicitly
into the components that need it; nothing here is cached at module level.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

from app.errors import ConfigError

REQUIRED_DB_KEYS = ("DB_USERNAME", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")

DEFAULT_PLACES_API_BASE_URL = "https://kudago.com/public-api/v1.4/places/"
LISTEN_HOST = "0.0.0.0"
LISTEN_PORT = 8080


def read_env_file(env_path: str | Path) -> dict[str, str]:
    """
    Parse simple KEY=VALUE pairs from an env file.

    Blank lines and ``#`` comments are skipped; surrounding quotes are stripped.
    """

    path = Path(env_path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read env file '{path}': {exc}") from exc

    values: dict[str, str] = {}
    for raw_line in raw_text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        value = value.strip().strip('"').strip("'")
        if key:
            values[key] = value
    return values


@dataclass(frozen=True)
class ConnectionParams:
    """
    PostgreSQL connection parameters for the execution-log store.
    """

    username: str
    password: str = field(repr=False)
    host: str
    port: int
    db_name: str

    def to_url(self, *, driver: str = "postgresql+psycopg") -> str:
        """
        Render a SQLAlchemy URL with the credentials percent-escaped.
        """

        return (
            f"{driver}://{quote(self.username, safe='')}:{quote(self.password, safe='')}"
            f"@{self.host}:{self.port}/{quote(self.db_name, safe='')}"
        )


@dataclass(frozen=True)
class DatabasePoolSettings:
    """
    SQLAlchemy engine pool behavior.
    """

    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800


@dataclass(frozen=True)
class PlacesAPISettings:
    """
    Upstream places API settings.
    """

    base_url: str = DEFAULT_PLACES_API_BASE_URL
    start_page: int = 1
    timeout_seconds: float = 15.0


@dataclass(frozen=True)
class ExecutionLogSettings:
    """
    Execution-log sink settings.

    ``enqueue_timeout_seconds`` of ``None`` blocks producers while the queue
    is full; a number rejects with ``SinkFullError`` after that long.
    """

    queue_size: int = 100
    enqueue_timeout_seconds: float | None = None


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level settings constructed once per process.
    """

    database: ConnectionParams
    pool: DatabasePoolSettings = field(default_factory=DatabasePoolSettings)
    places_api: PlacesAPISettings = field(default_factory=PlacesAPISettings)
    execution_log: ExecutionLogSettings = field(default_factory=ExecutionLogSettings)
    log_level: str = "INFO"


class _SettingsReader:
    """
    Typed lookups over merged env values that collect every problem.
    """

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = values
        self.errors: list[str] = []

    def required_str(self, name: str) -> str:
        value = (self._values.get(name) or "").strip()
        if not value:
            self.errors.append(f"{name} is not set.")
        return value

    def required_int(self, name: str) -> int:
        raw = self.required_str(name)
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError:
            self.errors.append(f"{name}='{raw}' is not an integer.")
            return 0

    def optional_str(self, name: str, default: str) -> str:
        value = (self._values.get(name) or "").strip()
        return value if value else default

    def optional_int(self, name: str, default: int, *, minimum: int) -> int:
        raw = (self._values.get(name) or "").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            self.errors.append(f"{name}='{raw}' is not an integer.")
            return default
        if value < minimum:
            self.errors.append(f"{name}={value} must be >= {minimum}.")
            return default
        return value

    def optional_float(self, name: str, default: float | None, *, minimum: float) -> float | None:
        raw = (self._values.get(name) or "").strip()
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            self.errors.append(f"{name}='{raw}' is not a number.")
            return default
        if value < minimum:
            self.errors.append(f"{name}={value} must be >= {minimum}.")
            return default
        return value

    def optional_bool(self, name: str, default: bool) -> bool:
        raw = self._values.get(name)
        if raw is None or not raw.strip():
            return default
        return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings(
    env_path: str | Path,
    environ: Mapping[str, str] | None = None,
) -> AppSettings:
    """
    Build ``AppSettings`` from an env file.

    Process environment variables override values from the file. Raises
    ``ConfigError`` listing every missing or invalid key so the operator can
    fix all problems in one restart cycle.
    """

    values = read_env_file(env_path)
    values.update(os.environ if environ is None else environ)
    reader = _SettingsReader(values)

    database = ConnectionParams(
        username=reader.required_str("DB_USERNAME"),
        password=reader.required_str("DB_PASSWORD"),
        host=reader.required_str("DB_HOST"),
        port=reader.required_int("DB_PORT"),
        db_name=reader.required_str("DB_NAME"),
    )
    pool = DatabasePoolSettings(
        echo=reader.optional_bool("SQL_ECHO", False),
        pool_size=reader.optional_int("DB_POOL_SIZE", 5, minimum=1),
        max_overflow=reader.optional_int("DB_MAX_OVERFLOW", 10, minimum=0),
        pool_recycle=reader.optional_int("DB_POOL_RECYCLE", 1800, minimum=-1),
    )
    places_api = PlacesAPISettings(
        base_url=reader.optional_str("PLACES_API_BASE_URL", DEFAULT_PLACES_API_BASE_URL),
        start_page=reader.optional_int("PLACES_API_START_PAGE", 1, minimum=1),
        timeout_seconds=reader.optional_float("PLACES_API_TIMEOUT_SECONDS", 15.0, minimum=0.1) or 15.0,
    )
    execution_log = ExecutionLogSettings(
        queue_size=reader.optional_int("EXECUTION_LOG_QUEUE_SIZE", 100, minimum=1),
        enqueue_timeout_seconds=reader.optional_float(
            "EXECUTION_LOG_ENQUEUE_TIMEOUT_SECONDS", None, minimum=0.0
        ),
    )
    log_level = reader.optional_str("LOG_LEVEL", "INFO").upper()

    if reader.errors:
        raise ConfigError(
            f"Invalid configuration in '{env_path}':\n"
            + "\n".join(f"  - {error}" for error in reader.errors)
        )

    return AppSettings(
        database=database,
        pool=pool,
        places_api=places_api,
        execution_log=execution_log,
        log_level=log_level,
    )
