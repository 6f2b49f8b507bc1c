def _create(client, headers, **payload):
    payload = {"name": "PAN Card", "description": "Apply for new PAN card", **payload}
    return client.post("/api/services", json=payload, headers=headers)


def test_listing_is_public(client):
    resp = client.get("/api/services")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "services": []}


def test_mutations_require_a_token(client):
    resp = _create(client, headers={})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "No token provided"}

    resp = _create(client, headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid token"

    assert client.put("/api/services/1", json={"name": "x"}).status_code == 401
    assert client.delete("/api/services/1").status_code == 401


def test_create_update_delete_flow(client, auth_headers):
    resp = _create(client, auth_headers)
    assert resp.status_code == 201
    service = resp.json()["service"]
    assert service["icon"] == "📄"
    assert service["color"] == "#2196F3"
    assert service["isActive"] is True
    assert "createdAt" in service

    resp = client.put(f"/api/services/{service['id']}", json={"description": "Updated"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["service"]["description"] == "Updated"
    assert resp.json()["service"]["name"] == "PAN Card"

    resp = client.delete(f"/api/services/{service['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    assert client.get("/api/services").json()["services"] == []
    direct = client.get(f"/api/services/{service['id']}")
    assert direct.status_code == 200
    assert direct.json()["service"]["isActive"] is False


def test_create_validation(client, auth_headers):
    resp = _create(client, auth_headers, description="")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Please provide name and description"}


def test_unknown_service(client, auth_headers):
    resp = client.put("/api/services/999", json={"name": "x"}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Service not found"}
    assert client.delete("/api/services/999", headers=auth_headers).status_code == 404
    assert client.get("/api/services/999").status_code == 404


def test_non_numeric_id_is_a_validation_error(client, auth_headers):
    resp = client.delete("/api/services/abc", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False
