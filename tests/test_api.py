from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, text
from sqlalchemy.exc import OperationalError

from counter_api.api.deps import get_counter_store
from counter_api.core.config import Settings
from counter_api.main import create_app
from counter_api.models.counter import counter_table


def test_count_starts_at_zero(client):
    r = client.get("/api/count")
    assert r.status_code == 200
    assert r.json() == {"success": True, "count": 0}


def test_increment_then_read(client):
    r = client.post("/api/increment")
    assert r.status_code == 200
    assert r.json() == {"success": True, "count": 1}

    r = client.post("/api/increment")
    assert r.json() == {"success": True, "count": 2}

    r = client.get("/api/count")
    assert r.json() == {"success": True, "count": 2}


def test_sequential_increments_are_monotonic(client):
    counts = [client.post("/api/increment").json()["count"] for _ in range(10)]
    assert counts == list(range(1, 11))
    assert client.get("/api/count").json()["count"] == 10


def test_concurrent_increments_return_distinct_values(client):
    k = 20
    with ThreadPoolExecutor(max_workers=8) as pool:
        responses = list(pool.map(lambda _: client.post("/api/increment"), range(k)))

    bodies = [r.json() for r in responses]
    assert all(b["success"] for b in bodies)
    assert sorted(b["count"] for b in bodies) == list(range(1, k + 1))
    assert client.get("/api/count").json() == {"success": True, "count": k}


def test_missing_row_reports_counter_not_found(client, sync_engine):
    with sync_engine.begin() as conn:
        conn.execute(delete(counter_table))

    expected = {"success": False, "error": "COUNTER_NOT_FOUND"}
    r = client.get("/api/count")
    assert r.status_code == 200
    assert r.json() == expected
    r = client.post("/api/increment")
    assert r.status_code == 200
    assert r.json() == expected


def test_dropped_table_reports_database_error(client, sync_engine):
    with sync_engine.begin() as conn:
        conn.execute(text("DROP TABLE counter"))

    expected = {"success": False, "error": "DATABASE_ERROR"}
    assert client.get("/api/count").json() == expected
    assert client.post("/api/increment").json() == expected


def test_unreachable_storage_reports_database_error(app, client, store_factory, unreachable_url):
    app.dependency_overrides[get_counter_store] = lambda: store_factory(unreachable_url)
    try:
        expected = {"success": False, "error": "DATABASE_ERROR"}
        for _ in range(2):
            r = client.get("/api/count")
            assert r.status_code == 200
            assert r.json() == expected
            r = client.post("/api/increment")
            assert r.status_code == 200
            assert r.json() == expected
    finally:
        app.dependency_overrides.clear()

    # Still serving once storage is back
    assert client.post("/api/increment").json() == {"success": True, "count": 1}


def test_count_survives_restart(app):
    with TestClient(app) as first:
        first.post("/api/increment")
        first.post("/api/increment")

    with TestClient(app) as second:
        assert second.get("/api/count").json() == {"success": True, "count": 2}


def test_startup_fails_when_storage_unreachable(store_factory, unreachable_url):
    app = create_app(store=store_factory(unreachable_url), settings=Settings(database_url=unreachable_url))
    with pytest.raises(OperationalError):
        with TestClient(app):
            pass


def test_health_ok(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": True}


def test_health_unavailable(app, client, store_factory, unreachable_url):
    app.dependency_overrides[get_counter_store] = lambda: store_factory(unreachable_url)
    try:
        r = client.get("/api/health")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 503
    assert r.json() == {"status": "unavailable", "database": False}


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["api"] == "/api"


def test_request_id_header(client):
    r = client.get("/api/count")
    assert r.headers.get("X-Request-ID")


def test_wrong_method_is_rejected(client):
    r = client.get("/api/increment")
    assert r.status_code == 405
    assert "detail" in r.json()
