import logging

import pytest
from fastapi.testclient import TestClient

from seva_kendra.catalog import DEFAULT_SERVICES
from seva_kendra.config import DEFAULT_SECRET_KEY
from seva_kendra.main import build_store, create_app
from seva_kendra.store import MemoryStore, SqlStore


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert "POST /api/auth/register" in body["endpoints"]
    assert body["version"]


def test_health_and_db_check(client):
    assert client.get("/health").json()["status"] == "OK"
    assert client.get("/api/test-db").json() == {"success": True, "message": "Database connection successful!"}


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_build_store_backends(settings):
    assert isinstance(build_store(settings), MemoryStore)
    sql = build_store(settings.model_copy(update={"store_backend": "sql", "database_url": "sqlite://"}))
    assert isinstance(sql, SqlStore)
    with pytest.raises(ValueError):
        build_store(settings.model_copy(update={"store_backend": "mongo"}))


@pytest.mark.integration
def test_full_flow_on_sqlite(settings, sql_store):
    seeded = settings.model_copy(update={"seed_services": True})
    with TestClient(create_app(settings=seeded, store=sql_store)) as client:
        services = client.get("/api/services").json()["services"]
        assert {s["name"] for s in services} == {name for name, _ in DEFAULT_SERVICES}

        token = client.post(
            "/api/auth/register", json={"name": "Asha", "phone": "9876543210", "password": "s3cret"}
        ).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}
        assert client.post(
            "/api/auth/register", json={"name": "Asha", "phone": "9876543210", "password": "s3cret"}
        ).status_code == 400

        pan = next(s for s in services if s["name"] == "PAN Card")
        assert client.delete(f"/api/services/{pan['id']}", headers=headers).status_code == 200
        assert pan["id"] not in [s["id"] for s in client.get("/api/services").json()["services"]]

        request = client.post(
            "/api/requests",
            json={"userName": "Asha", "userPhone": "9876543210", "serviceName": "PAN Card", "serviceId": pan["id"]},
        ).json()["request"]
        assert request["serviceId"] == str(pan["id"])

        updated = client.put(f"/api/requests/{request['id']}/status", json={"status": "completed"}).json()
        assert updated["request"]["status"] == "completed"
        tracked = client.get(f"/api/requests/track/{request['registrationNo']}").json()["request"]
        assert tracked["status"] == "completed"


OVERSIZED_ID = 10**20


@pytest.mark.integration
def test_out_of_range_ids_are_rejected_on_sqlite(settings, sql_store):
    with TestClient(create_app(settings=settings, store=sql_store)) as client:
        token = client.post(
            "/api/auth/register", json={"name": "Asha", "phone": "9876543210", "password": "s3cret"}
        ).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        responses = [
            client.get(f"/api/services/{OVERSIZED_ID}"),
            client.put(f"/api/services/{OVERSIZED_ID}", json={"name": "x"}, headers=headers),
            client.delete(f"/api/services/{OVERSIZED_ID}", headers=headers),
            client.put(f"/api/requests/{OVERSIZED_ID}/status", json={"status": "approved"}),
            client.get("/api/services/0"),
        ]
    for resp in responses:
        assert resp.status_code == 400
        assert resp.json()["success"] is False


def test_default_secret_key_is_reported(settings, memory_store, caplog):
    insecure = settings.model_copy(update={"secret_key": DEFAULT_SECRET_KEY})
    with caplog.at_level(logging.WARNING, logger="seva_kendra.main"):
        create_app(settings=insecure, store=memory_store)
    assert "SECRET_KEY is not set" in caplog.text


def test_configured_secret_key_is_not_reported(settings, memory_store, caplog):
    with caplog.at_level(logging.WARNING, logger="seva_kendra.main"):
        create_app(settings=settings, store=memory_store)
    assert "SECRET_KEY is not set" not in caplog.text
