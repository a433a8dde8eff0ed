import pytest
from fastapi.testclient import TestClient

from tasktrack_api.main import create_app
from tasktrack_api.store import JsonFileStore


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "data.json")


@pytest.fixture
def store(data_file):
    return JsonFileStore(data_file)


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))


@pytest.fixture
def register(client):
    """Register a user and return (session body, auth headers)."""

    def _register(username="alice", password="pw"):
        res = client.post("/register", json={"username": username, "password": password})
        assert res.status_code == 201, res.text
        body = res.json()
        return body, {"Authorization": f"Bearer {body['token']}"}

    return _register
