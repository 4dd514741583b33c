"""
tests/test_config.py

Env-file parsing and settings validation.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from app.config import DEFAULT_PLACES_API_BASE_URL, ConnectionParams, load_settings, read_env_file
from app.errors import ConfigError

_VALID_ENV = """
# execution log database
DB_USERNAME=places
DB_PASSWORD="p@ss word"
DB_HOST=db.internal
DB_PORT=5433
export DB_NAME='places_logs'
"""


def _write_env(tmp_path: Path, content: str) -> Path:
    env_path = tmp_path / ".env"
    env_path.write_text(content, encoding="utf-8")
    return env_path


def test_reads_database_params_and_defaults(tmp_path: Path) -> None:
    settings = load_settings(_write_env(tmp_path, _VALID_ENV), environ={})

    assert settings.database == ConnectionParams(
        username="places",
        password="p@ss word",
        host="db.internal",
        port=5433,
        db_name="places_logs",
    )
    assert settings.places_api.base_url == DEFAULT_PLACES_API_BASE_URL
    assert settings.places_api.start_page == 1
    assert settings.execution_log.queue_size == 100
    assert settings.execution_log.enqueue_timeout_seconds is None
    assert settings.log_level == "INFO"


def test_environment_overrides_file_values(tmp_path: Path) -> None:
    settings = load_settings(
        _write_env(tmp_path, _VALID_ENV),
        environ={"DB_HOST": "override", "PLACES_API_START_PAGE": "210", "LOG_LEVEL": "debug"},
    )

    assert settings.database.host == "override"
    assert settings.places_api.start_page == 210
    assert settings.log_level == "DEBUG"


def test_missing_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read env file"):
        load_settings(tmp_path / "missing.env", environ={})


def test_every_problem_is_reported_at_once(tmp_path: Path) -> None:
    env_path = _write_env(tmp_path, "DB_USERNAME=places\nDB_PORT=not-a-port\nEXECUTION_LOG_QUEUE_SIZE=0\n")

    with pytest.raises(ConfigError) as excinfo:
        load_settings(env_path, environ={})

    message = str(excinfo.value)
    for expected in ("DB_PASSWORD", "DB_HOST", "DB_NAME", "DB_PORT='not-a-port'", "EXECUTION_LOG_QUEUE_SIZE"):
        assert expected in message
    assert "DB_USERNAME" not in message


def test_read_env_file_skips_comments_and_blank_lines(tmp_path: Path) -> None:
    values = read_env_file(_write_env(tmp_path, "# comment\n\nA=1\nnot a pair\nB = two \n"))
    assert values == {"A": "1", "B": "two"}


def test_connection_url_escapes_credentials_and_hides_password_in_repr() -> None:
    params = ConnectionParams(username="user", password="p@ss/word", host="h", port=5432, db_name="db")

    assert params.to_url() == "postgresql+psycopg://user:p%40ss%2Fword@h:5432/db"
    assert "p@ss/word" not in repr(params)
