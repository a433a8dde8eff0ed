from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import List, Optional

from .errors import NotFoundError
from .models import TodoRecord, UserRecord
from .store import Store

TODO_ID_BYTES = 16


def _now() -> str:
    """Current UTC instant as ISO8601 with milliseconds and a 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _find(todos: List[TodoRecord], todo_id: str) -> int:
    for index, todo in enumerate(todos):
        if todo.get("id") == todo_id:
            return index
    return -1


# PUBLIC_INTERFACE
def create(
    store: Store,
    user: UserRecord,
    title: str,
    description: str,
    completed: Optional[bool] = False,
) -> TodoRecord:
    """Append a new todo to the end of the user's list and persist."""
    now = _now()
    todo: TodoRecord = {
        "id": secrets.token_hex(TODO_ID_BYTES),
        "title": title,
        "description": description,
        "completed": bool(completed),
        "createdAt": now,
        "editedAt": None,
        "completedAt": now if completed else None,
    }
    with store.lock:
        todos = store.get_todos(user["usernameKey"])
        todos.append(todo)
        store.put_todos(user["usernameKey"], todos)
        store.save()
    return todo


# PUBLIC_INTERFACE
def list_todos(store: Store, user: UserRecord) -> List[TodoRecord]:
    """Return the user's todos in insertion order."""
    with store.lock:
        return list(store.get_todos(user["usernameKey"]))


# PUBLIC_INTERFACE
def update(
    store: Store,
    todo_id: str,
    user: UserRecord,
    title: Optional[str] = None,
    description: Optional[str] = None,
    completed: Optional[bool] = None,
) -> TodoRecord:
    """
    Apply a partial update to one of the user's todos and persist.

    - Empty or missing title/description keep the current value.
    - completed is applied whenever it is not None; a false->true transition
      stamps completedAt, true->false clears it, a repeat leaves it alone.
    - editedAt is refreshed on every call.

    Raises:
        NotFoundError: if the id is not in this user's list.
    """
    with store.lock:
        todos = store.get_todos(user["usernameKey"])
        index = _find(todos, todo_id)
        if index == -1:
            raise NotFoundError()

        todo = todos[index]
        was_completed = bool(todo.get("completed"))
        now = _now()
        todo["title"] = title or todo.get("title", "")
        todo["description"] = description or todo.get("description", "")
        if completed is not None:
            todo["completed"] = completed
            if completed and not was_completed:
                todo["completedAt"] = now
            elif was_completed and not completed:
                todo["completedAt"] = None
        todo["editedAt"] = now

        store.put_todos(user["usernameKey"], todos)
        store.save()
        return dict(todo)  # type: ignore[return-value]


# PUBLIC_INTERFACE
def delete(store: Store, todo_id: str, user: UserRecord) -> None:
    """
    Remove one of the user's todos and persist.

    Raises:
        NotFoundError: if the id is not in this user's list.
    """
    with store.lock:
        todos = store.get_todos(user["usernameKey"])
        index = _find(todos, todo_id)
        if index == -1:
            raise NotFoundError()
        del todos[index]
        store.put_todos(user["usernameKey"], todos)
        store.save()
