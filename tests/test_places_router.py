"""
tests/test_places_router.py

End-to-end request handling through the FastAPI app with a fake upstream.
"""

from __future__ import annotations

import json
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from app.api.routers import places as places_routes
from app.config import AppSettings, ExecutionLogSettings, PlacesAPISettings
from app.connectors.places_connector import PlacesConnector
from app.domain.place import Place
from app.main import create_app
from app.errors import SerializationError
from app.serializers import JSONSerializer, get_serializer
from fakes import BASE_URL, BlockingStore, FakeResponse, FakeSession, RecordingStore, page_response


def _two_page_session() -> FakeSession:
    return FakeSession(
        {
            1: page_response([1, 2], next_url=f"{BASE_URL}?page=2"),
            2: page_response([3], next_url=None),
        }
    )


@pytest.fixture()
def build_client(settings: AppSettings, recording_store: RecordingStore):
    clients: list[TestClient] = []

    def _build(session: FakeSession) -> TestClient:
        connector = PlacesConnector(settings=settings.places_api, session=session)  # type: ignore[arg-type]
        client = TestClient(create_app(settings, places_connector=connector, log_store=recording_store))
        client.__enter__()
        clients.append(client)
        return client

    yield _build
    for client in clients:
        client.__exit__(None, None, None)


def test_default_format_is_json(build_client, recording_store: RecordingStore) -> None:
    client = build_client(_two_page_session())

    response = client.get("/all")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert [item["id"] for item in json.loads(response.content)] == [1, 2, 3]


def test_gob_format_returns_binary_payload(build_client) -> None:
    client = build_client(_two_page_session())

    response = client.get("/all", params={"format": "gob"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/octet-stream"
    places = get_serializer("gob", Place).deserialize(response.content)
    assert [place.id for place in places] == [1, 2, 3]


@pytest.mark.parametrize("requested", ["xml", ""])
def test_explicit_unsupported_format_is_400(build_client, requested: str) -> None:
    session = _two_page_session()
    client = build_client(session)

    response = client.get("/all", params={"format": requested})

    assert response.status_code == 400
    assert f"'{requested}'" in response.json()["detail"]
    assert session.calls == []


def test_upstream_failure_is_502_with_body(build_client) -> None:
    session = FakeSession(
        {
            1: page_response([1], next_url=f"{BASE_URL}?page=2"),
            2: FakeResponse(body=b"<html>not json</html>"),
        }
    )
    client = build_client(session)

    response = client.get("/all")

    assert response.status_code == 502
    assert "not valid JSON" in response.json()["detail"]


def test_timing_record_is_persisted_for_success_and_failure(
    settings: AppSettings, recording_store: RecordingStore
) -> None:
    session = _two_page_session()
    connector = PlacesConnector(settings=settings.places_api, session=session)  # type: ignore[arg-type]

    with TestClient(create_app(settings, places_connector=connector, log_store=recording_store)) as client:
        assert client.get("/all").status_code == 200
        assert client.get("/all", params={"format": "yaml"}).status_code == 400

    # leaving the client runs close-then-drain
    assert [record.task_name for record in recording_store.records] == ["GetAll", "GetAll"]
    assert all(record.duration_seconds >= 0 for record in recording_store.records)
    assert session.closed


def test_start_page_comes_from_settings(settings: AppSettings, recording_store: RecordingStore) -> None:
    custom = AppSettings(
        database=settings.database,
        places_api=PlacesAPISettings(base_url=BASE_URL, start_page=210),
        execution_log=settings.execution_log,
    )
    session = FakeSession({210: page_response([9], next_url=None)})
    connector = PlacesConnector(settings=custom.places_api, session=session)  # type: ignore[arg-type]

    with TestClient(create_app(custom, places_connector=connector, log_store=recording_store)) as client:
        response = client.get("/all")

    assert response.status_code == 200
    assert session.requested_pages == [210]


def test_health_reports_sink_state(build_client) -> None:
    client = build_client(_two_page_session())

    payload = client.get("/health").json()

    assert payload == {"status": "ok", "execution_log_sink": "running", "pending_execution_logs": 0}


# ---------------------------------------------------------------------------
# Internal failures
# ---------------------------------------------------------------------------


class ExplodingSerializer(JSONSerializer):
    def serialize(self, items):
        raise SerializationError("json: cannot encode records: boom")


def test_serialization_failure_is_500_with_body(build_client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(places_routes, "get_serializer", lambda format, record_type: ExplodingSerializer(record_type))
    client = build_client(_two_page_session())

    response = client.get("/all")

    assert response.status_code == 500
    assert response.json() == {"detail": "json: cannot encode records: boom"}


def test_closed_sink_is_503_with_body(build_client) -> None:
    client = build_client(_two_page_session())
    client.app.state.execution_log_sink.close()

    response = client.get("/all")

    assert response.status_code == 503
    assert "sink is closed" in response.json()["detail"]
    assert client.get("/health").json()["execution_log_sink"] == "closed"


def test_closed_sink_keeps_upstream_failure_as_502(build_client) -> None:
    client = build_client(FakeSession({1: FakeResponse(status_code=500)}))
    client.app.state.execution_log_sink.close()

    response = client.get("/all")

    assert response.status_code == 502
    assert "HTTP 500" in response.json()["detail"]


def test_full_execution_log_queue_is_503_with_body(settings: AppSettings) -> None:
    store = BlockingStore()
    bounded = replace(
        settings,
        execution_log=ExecutionLogSettings(queue_size=1, enqueue_timeout_seconds=0.05),
    )
    connector = PlacesConnector(settings=bounded.places_api, session=_two_page_session())  # type: ignore[arg-type]

    with TestClient(create_app(bounded, places_connector=connector, log_store=store)) as client:
        try:
            assert client.get("/all").status_code == 200
            # the writer holds the first record; the second fills the only slot
            assert store.entered.wait(timeout=5)
            assert client.get("/all").status_code == 200
            response = client.get("/all")
        finally:
            store.release.set()

    assert response.status_code == 503
    assert "queue full" in response.json()["detail"]
    assert len(store.records) == 2
