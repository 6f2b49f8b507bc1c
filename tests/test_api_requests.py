import re

import pytest
from fastapi.testclient import TestClient

from seva_kendra.main import create_app

SUBMISSION = {"userName": "Asha", "userPhone": "9876543210", "serviceName": "PAN Card", "serviceId": "2"}


def _submit(client, **overrides):
    return client.post("/api/requests", json={**SUBMISSION, **overrides})


def test_submit_track_and_update(client):
    resp = _submit(client, status="approved", aadharNumber="123412341234", address="Ward 4")
    assert resp.status_code == 201
    request = resp.json()["request"]
    assert request["status"] == "pending"
    assert re.match(r"^REG\d+$", request["registrationNo"])
    assert request["aadharNumber"] == "123412341234"
    assert set(request) >= {"id", "userName", "userPhone", "serviceName", "serviceId", "submittedAt", "updatedAt"}

    tracked = client.get(f"/api/requests/track/{request['registrationNo']}")
    assert tracked.status_code == 200
    assert tracked.json()["request"] == request

    resp = client.put(f"/api/requests/{request['id']}/status", json={"status": "approved"})
    assert resp.status_code == 200
    assert resp.json()["request"]["status"] == "approved"


def test_submit_missing_fields(client):
    resp = _submit(client, serviceName="")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Please provide all required fields"}


def test_submit_long_aadhar(client):
    resp = _submit(client, aadharNumber="1" * 13)
    assert resp.status_code == 400


def test_track_unknown(client):
    resp = client.get("/api/requests/track/REG0")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Request not found"}


def test_listings(client):
    first = _submit(client).json()["request"]
    other = _submit(client, userPhone="9123456780").json()["request"]

    all_requests = client.get("/api/requests").json()
    assert all_requests["success"] is True
    assert [r["id"] for r in all_requests["requests"]] == [other["id"], first["id"]]

    mine = client.get("/api/requests/user/9876543210").json()["requests"]
    assert [r["id"] for r in mine] == [first["id"]]


def test_invalid_status(client):
    request = _submit(client).json()["request"]
    resp = client.put(f"/api/requests/{request['id']}/status", json={"status": "shipped"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid status"}
    assert client.get(f"/api/requests/track/{request['registrationNo']}").json()["request"]["status"] == "pending"


def test_status_for_unknown_request(client):
    resp = client.put("/api/requests/999/status", json={"status": "approved"})
    assert resp.status_code == 404


def test_duplicate_supplied_registration_no(client):
    assert _submit(client, registrationNo="REG777").status_code == 201
    resp = _submit(client, registrationNo="REG777")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Registration number already exists"


@pytest.fixture
def gated_client(settings, memory_store):
    gated = settings.model_copy(update={"requests_read_requires_auth": True, "requests_status_requires_auth": True})
    with TestClient(create_app(settings=gated, store=memory_store)) as c:
        yield c


def test_gates_can_be_switched_on(gated_client):
    request = _submit(gated_client).json()["request"]

    assert gated_client.get("/api/requests").status_code == 401
    assert gated_client.get("/api/requests/user/9876543210").status_code == 401
    assert gated_client.put(f"/api/requests/{request['id']}/status", json={"status": "approved"}).status_code == 401
    # tracking by registration number stays public
    assert gated_client.get(f"/api/requests/track/{request['registrationNo']}").status_code == 200

    token = gated_client.post(
        "/api/auth/register", json={"name": "Officer", "phone": "9000000002", "password": "pw"}
    ).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert gated_client.get("/api/requests", headers=headers).status_code == 200
    resp = gated_client.put(f"/api/requests/{request['id']}/status", json={"status": "approved"}, headers=headers)
    assert resp.status_code == 200
