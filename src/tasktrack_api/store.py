from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from threading import Lock, RLock
from typing import Any, Dict, List, Optional, Tuple

from .identity import normalize, resolve_existing_key
from .models import TodoRecord, UserRecord
from .settings import get_settings

logger = logging.getLogger(__name__)

Users = Dict[str, UserRecord]
Todos = Dict[str, List[TodoRecord]]

# Older clients could omit fields entirely (JSON drops undefined values).
_TODO_DEFAULTS: Dict[str, Any] = {
    "title": "",
    "description": "",
    "completed": False,
    "createdAt": None,
    "editedAt": None,
    "completedAt": None,
}


def _fill_todo(item: Dict[str, Any]) -> TodoRecord:
    todo = dict(item)
    for field, default in _TODO_DEFAULTS.items():
        if todo.get(field) is None:
            todo[field] = default
    todo["completed"] = bool(todo["completed"])
    return todo  # type: ignore[return-value]


# PUBLIC_INTERFACE
def migrate_snapshot(users: Dict[str, Any], todos: Dict[str, Any]) -> Tuple[Users, Todos]:
    """
    Re-key a loaded snapshot by canonical username.

    - Each user's key is recomputed from its username (or its storage key when
      the username is missing); entries normalizing to '' are dropped.
    - The first user seen per canonical key is kept.
    - Todo lists stored under the legacy key or the canonical key are merged
      into one list, de-duplicated by todo id (first occurrence wins, order kept).

    Missing todo fields are filled with empty defaults. Todo lists with no
    matching user are dropped. Running the pass on its own output returns an
    equal snapshot.
    """
    migrated_users: Users = {}
    migrated_todos: Todos = {}

    for key, user in users.items():
        if not isinstance(user, dict):
            logger.warning("Skipping malformed user entry under key %r", key)
            continue
        username_key = normalize(user.get("username") or key)
        if not username_key:
            logger.warning("Skipping user entry %r with an empty username", key)
            continue
        if username_key not in migrated_users:
            migrated_users[username_key] = {**user, "usernameKey": username_key}  # type: ignore[typeddict-item]

        if isinstance(todos.get(key), list):
            incoming = todos[key]
        elif isinstance(todos.get(username_key), list):
            incoming = todos[username_key]
        else:
            incoming = []

        merged = list(migrated_todos.get(username_key, []))
        seen = {item.get("id") for item in merged}
        for item in incoming:
            if not isinstance(item, dict) or item.get("id") in seen:
                continue
            merged.append(_fill_todo(item))
            seen.add(item.get("id"))
        migrated_todos[username_key] = merged

    return migrated_users, migrated_todos


# PUBLIC_INTERFACE
class Store(ABC):
    """
    Abstract contract for the users/todos store.

    The store is the only owner of both maps. Callers run their
    locate -> mutate -> save sequence while holding `lock`.
    """

    @property
    @abstractmethod
    def lock(self) -> RLock:
        """Global re-entrant lock guarding every read-modify-write cycle."""

    @property
    @abstractmethod
    def backend(self) -> str:
        """Short backend name reported by the health check."""

    @abstractmethod
    def load(self) -> None:
        """Replace in-memory state with the persisted snapshot, if one is readable."""

    @abstractmethod
    def save(self) -> None:
        """Persist the full snapshot. Failures are logged, never raised."""

    @abstractmethod
    def get_user(self, key: str) -> Optional[UserRecord]:
        """Return the user stored under a canonical key, or None."""

    @abstractmethod
    def put_user(self, key: str, user: UserRecord) -> None:
        """Insert or replace the user under a canonical key."""

    @abstractmethod
    def users(self) -> List[UserRecord]:
        """Return all users in insertion order."""

    @abstractmethod
    def find_user_by_token(self, token: str) -> Optional[UserRecord]:
        """Return the user whose current token equals `token` exactly, or None."""

    @abstractmethod
    def get_todos(self, key: str) -> List[TodoRecord]:
        """Return the user's todo list, creating an empty one on first access."""

    @abstractmethod
    def put_todos(self, key: str, todos: List[TodoRecord]) -> None:
        """Replace the user's todo list."""

    def resolve_key(self, raw: Optional[str]) -> str:
        """Return the stored key for a submitted username, or ''."""
        with self.lock:
            return resolve_existing_key(raw, [u["usernameKey"] for u in self.users()])


class InMemoryStore(Store):
    """
    Thread-safe in-memory store suitable for testing and the 'memory' backend.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._users: Users = {}
        self._todos: Todos = {}

    @property
    def lock(self) -> RLock:
        return self._lock

    @property
    def backend(self) -> str:
        return "memory"

    def load(self) -> None:
        return None

    def save(self) -> None:
        return None

    def get_user(self, key: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users.get(key)

    def put_user(self, key: str, user: UserRecord) -> None:
        with self._lock:
            self._users[key] = user

    def users(self) -> List[UserRecord]:
        with self._lock:
            return list(self._users.values())

    def find_user_by_token(self, token: str) -> Optional[UserRecord]:
        with self._lock:
            for user in self._users.values():
                if user.get("token") == token:
                    return user
            return None

    def get_todos(self, key: str) -> List[TodoRecord]:
        with self._lock:
            return self._todos.setdefault(key, [])

    def put_todos(self, key: str, todos: List[TodoRecord]) -> None:
        with self._lock:
            self._todos[key] = todos

    def resolve_key(self, raw: Optional[str]) -> str:
        with self._lock:
            return resolve_existing_key(raw, self._users.keys())

    def snapshot(self) -> Dict[str, Any]:
        """Return the full state in its persisted layout."""
        with self._lock:
            return {"users": self._users, "todos": self._todos}


class JsonFileStore(InMemoryStore):
    """
    Store persisted as one formatted JSON document: {"users": {...}, "todos": {...}}.

    Every save rewrites the whole file. Read and write failures are logged and
    the in-memory state stays authoritative.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    @property
    def backend(self) -> str:
        return "file"

    def load(self) -> None:
        with self._lock:
            try:
                if not os.path.exists(self._path):
                    return
                with open(self._path, "r", encoding="utf-8") as f:
                    raw = f.read()
                if not raw:
                    return
                parsed = json.loads(raw)
                if not isinstance(parsed, dict):
                    raise ValueError("snapshot root must be a JSON object")
                users = parsed.get("users") or {}
                todos = parsed.get("todos") or {}
                if not isinstance(users, dict) or not isinstance(todos, dict):
                    raise ValueError("'users' and 'todos' must be JSON objects")
                migrated_users, migrated_todos = migrate_snapshot(users, todos)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.error("Failed to load data store from %s: %s", self._path, e)
                return

            self._users, self._todos = migrated_users, migrated_todos
            logger.info(
                "Loaded %d users and %d todos from %s",
                len(self._users),
                sum(len(items) for items in self._todos.values()),
                self._path,
            )

    def save(self) -> None:
        with self._lock:
            try:
                os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
                with open(self._path, "w", encoding="utf-8") as f:
                    json.dump(self.snapshot(), f, indent=2, ensure_ascii=False)
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to save data store to %s: %s", self._path, e)


_store: Optional[Store] = None
_store_lock = Lock()


# PUBLIC_INTERFACE
def get_store() -> Store:
    """
    Factory returning the process-wide store configured by settings.
    - file: JsonFileStore at DATA_FILE, loaded once on first use
    - memory: InMemoryStore

    Concurrent first calls all receive the same instance.
    """
    global _store
    with _store_lock:
        if _store is not None:
            return _store
        settings = get_settings()
        if settings.persistence_backend == "memory":
            logger.info("Using in-memory store")
            _store = InMemoryStore()
        else:
            store = JsonFileStore(settings.data_file)
            store.load()
            logger.info("Using JSON file store at %s", settings.data_file)
            _store = store
        return _store
