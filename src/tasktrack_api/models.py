from __future__ import annotations

from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class UserRecord(TypedDict):
    """
    A registered account as held by the store and written to the snapshot file.

    Fields:
    - id: Sequential integer assigned at registration (1-based)
    - username: Display username, original case as submitted (trimmed)
    - usernameKey: Canonical key (trimmed, lowercased)
    - password: Plaintext password as submitted
    - token: Current session secret; rotated on logout
    """

    id: int
    username: str
    usernameKey: str
    password: Optional[str]
    token: str


# PUBLIC_INTERFACE
class TodoRecord(TypedDict):
    """
    A todo item owned by exactly one user.

    Timestamps are UTC ISO8601 strings with a 'Z' suffix. completedAt is set
    only while completed is True.
    """

    id: str
    title: str
    description: str
    completed: bool
    createdAt: str
    editedAt: Optional[str]
    completedAt: Optional[str]
