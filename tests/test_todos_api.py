import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from tasktrack_api.main import create_app
from tasktrack_api.store import InMemoryStore


def create_todo_payload(title="Test Task", description="Do something", completed=None):
    payload = {"title": title, "description": description}
    if completed is not None:
        payload["completed"] = completed
    return payload


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def assert_todo_shape(todo: dict):
    for key in ["id", "title", "description", "completed", "createdAt", "editedAt", "completedAt"]:
        assert key in todo
    assert isinstance(todo["id"], str)
    assert len(todo["id"]) == 32
    assert isinstance(todo["title"], str)
    assert isinstance(todo["completed"], bool)
    assert todo["createdAt"].endswith("Z")
    parse_ts(todo["createdAt"])


@pytest.fixture
def auth(register):
    _, headers = register("alice")
    return headers


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] == "file"


class TestTodosCRUD:
    def test_create_todo_defaults(self, client, auth):
        res = client.post("/todos", json=create_todo_payload(title="Buy milk"), headers=auth)
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["title"] == "Buy milk"
        assert todo["description"] == "Do something"
        assert todo["completed"] is False
        assert todo["editedAt"] is None
        assert todo["completedAt"] is None

    def test_create_completed_sets_completed_at(self, client, auth):
        res = client.post("/todos", json=create_todo_payload(completed=True), headers=auth)
        assert res.status_code == 201
        todo = res.json()
        assert todo["completed"] is True
        assert todo["completedAt"] is not None
        assert parse_ts(todo["completedAt"]) >= parse_ts(todo["createdAt"])

    def test_create_completed_null_means_false(self, client, auth):
        res = client.post("/todos", json={"title": "t", "description": "d", "completed": None}, headers=auth)
        assert res.status_code == 201
        todo = res.json()
        assert todo["completed"] is False
        assert todo["completedAt"] is None

    def test_create_then_list_round_trip(self, client, auth):
        created = [
            client.post("/todos", json=create_todo_payload(title=f"Task {i}"), headers=auth).json()
            for i in range(3)
        ]
        res = client.get("/todos", headers=auth)
        assert res.status_code == 200
        # Insertion order, records unchanged
        assert res.json() == created

    def test_update_partial_fields(self, client, auth):
        tid = client.post("/todos", json=create_todo_payload(title="Partial", description="X"), headers=auth).json()["id"]

        res = client.put(f"/todos/{tid}", json={"title": "Partial Updated"}, headers=auth)
        assert res.status_code == 200
        updated = res.json()
        assert updated["id"] == tid
        assert updated["title"] == "Partial Updated"
        assert updated["description"] == "X"
        assert updated["completed"] is False
        assert updated["editedAt"] is not None

    def test_update_empty_strings_are_ignored(self, client, auth):
        tid = client.post("/todos", json=create_todo_payload(title="Keep", description="Me"), headers=auth).json()["id"]

        res = client.put(f"/todos/{tid}", json={"title": "", "description": ""}, headers=auth)
        assert res.status_code == 200
        updated = res.json()
        assert updated["title"] == "Keep"
        assert updated["description"] == "Me"
        assert updated["editedAt"] is not None

    def test_complete_then_reopen(self, client, auth):
        tid = client.post("/todos", json=create_todo_payload(), headers=auth).json()["id"]

        done = client.put(f"/todos/{tid}", json={"completed": True}, headers=auth).json()
        assert done["completed"] is True
        assert done["completedAt"] is not None

        reopened = client.put(f"/todos/{tid}", json={"completed": False}, headers=auth).json()
        assert reopened["completed"] is False
        assert reopened["completedAt"] is None

    def test_repeated_completion_keeps_completed_at(self, client, auth):
        tid = client.post("/todos", json=create_todo_payload(), headers=auth).json()["id"]

        first = client.put(f"/todos/{tid}", json={"completed": True}, headers=auth).json()
        second = client.put(f"/todos/{tid}", json={"completed": True}, headers=auth).json()
        assert second["completedAt"] == first["completedAt"]
        assert second["editedAt"] is not None
        assert parse_ts(second["editedAt"]) >= parse_ts(first["editedAt"])

    def test_update_not_found(self, client, auth):
        res = client.put("/todos/doesnotexist", json={"title": "Nope"}, headers=auth)
        assert res.status_code == 404
        assert res.json() == {"error": "Todo not found"}

    def test_delete_todo(self, client, auth):
        tid = client.post("/todos", json=create_todo_payload(title="ToDelete"), headers=auth).json()["id"]

        res_del = client.delete(f"/todos/{tid}", headers=auth)
        assert res_del.status_code == 204
        assert res_del.text == ""

        listed = client.get("/todos", headers=auth).json()
        assert all(t["id"] != tid for t in listed)

        # Deleting again is 404
        res_del_again = client.delete(f"/todos/{tid}", headers=auth)
        assert res_del_again.status_code == 404
        assert res_del_again.json() == {"error": "Todo not found"}


class TestIsolation:
    def test_other_user_cannot_touch_todo(self, client, register):
        _, alice = register("alice")
        _, bob = register("bob")
        tid = client.post("/todos", json=create_todo_payload(), headers=alice).json()["id"]

        assert client.get("/todos", headers=bob).json() == []
        assert client.put(f"/todos/{tid}", json={"title": "Mine"}, headers=bob).status_code == 404
        assert client.delete(f"/todos/{tid}", headers=bob).status_code == 404

        # Still intact for the owner
        todos = client.get("/todos", headers=alice).json()
        assert [t["title"] for t in todos] == ["Test Task"]


class TestAuthGate:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/todos"),
            ("post", "/todos"),
            ("put", "/todos/abc"),
            ("delete", "/todos/abc"),
        ],
    )
    def test_requires_token(self, client, method, path):
        kwargs = {"json": create_todo_payload()} if method in ("post", "put") else {}
        res = getattr(client, method)(path, **kwargs)
        assert res.status_code == 401
        assert res.json() == {"error": "Unauthorized"}

    def test_raw_token_accepted(self, client, register):
        body, _ = register("alice")
        res = client.get("/todos", headers={"Authorization": body["token"]})
        assert res.status_code == 200


class TestValidationErrors:
    def test_create_empty_title(self, client, auth):
        res = client.post("/todos", json={"title": "", "description": "x"}, headers=auth)
        assert res.status_code == 400
        assert res.json() == {"error": "Request validation failed"}

    def test_create_missing_description(self, client, auth):
        res = client.post("/todos", json={"title": "x"}, headers=auth)
        assert res.status_code == 400

    def test_update_bad_completed_type(self, client, auth):
        tid = client.post("/todos", json=create_todo_payload(), headers=auth).json()["id"]
        res = client.put(f"/todos/{tid}", json={"completed": "maybe"}, headers=auth)
        assert res.status_code == 400
        assert res.json() == {"error": "Request validation failed"}


class TestPersistence:
    def test_mutations_are_flushed(self, client, auth, data_file):
        todo = client.post("/todos", json=create_todo_payload(title="Saved"), headers=auth).json()
        with open(data_file, encoding="utf-8") as f:
            snapshot = json.load(f)
        assert snapshot["todos"]["alice"] == [todo]
        assert snapshot["users"]["alice"]["usernameKey"] == "alice"


class TestLegacySnapshot:
    def test_todos_missing_fields_are_served(self, client, store, data_file):
        with open(data_file, "w", encoding="utf-8") as f:
            json.dump(
                {
                    "users": {"Alice": {"id": 1, "username": "Alice", "password": "pw", "token": "tok"}},
                    "todos": {"Alice": [{"id": "a1", "description": "no title", "completed": False}]},
                },
                f,
            )
        store.load()
        headers = {"Authorization": "Bearer tok"}

        res = client.get("/todos", headers=headers)
        assert res.status_code == 200
        [todo] = res.json()
        assert todo["id"] == "a1"
        assert todo["title"] == ""
        assert todo["createdAt"] is None

        res = client.put("/todos/a1", json={"completed": True}, headers=headers)
        assert res.status_code == 200
        updated = res.json()
        assert updated["completed"] is True
        assert updated["completedAt"] is not None
        assert updated["description"] == "no title"


class TestErrorShape:
    def test_unknown_path(self, client):
        res = client.get("/nope")
        assert res.status_code == 404
        assert res.json() == {"error": "Not Found"}

    def test_wrong_method(self, client):
        res = client.patch("/todos")
        assert res.status_code == 405
        assert res.json() == {"error": "Method Not Allowed"}

    def test_unexpected_failure_is_json(self):
        class BrokenStore(InMemoryStore):
            def get_todos(self, key):
                raise RuntimeError("boom")

        broken = BrokenStore()
        client = TestClient(create_app(store=broken), raise_server_exceptions=False)
        registered = client.post("/register", json={"username": "alice", "password": "pw"})
        # register writes the empty list via put_todos, so it succeeds
        assert registered.status_code == 201

        res = client.get("/todos", headers={"Authorization": registered.json()["token"]})
        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}
