import pytest
from fastapi.testclient import TestClient

from seva_kendra.config import Settings
from seva_kendra.database import make_engine, make_session_factory
from seva_kendra.main import create_app
from seva_kendra.store import MemoryStore, SqlStore


@pytest.fixture
def settings():
    return Settings(
        secret_key="test-secret",
        store_backend="memory",
        seed_services=False,
        access_token_expire_minutes=43200,
        requests_read_requires_auth=False,
        requests_status_requires_auth=False,
        log_level="DEBUG",
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_store():
    store = SqlStore(make_session_factory(make_engine("sqlite://")))
    store.setup()
    yield store
    store.engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def app(settings, memory_store):
    return create_app(settings=settings, store=memory_store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "Operator", "phone": "9000000001", "password": "op-secret"},
    )
    assert resp.status_code == 201
    return {"Authorization": f"Bearer {resp.json()['token']}"}
