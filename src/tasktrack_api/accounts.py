"""
Registration and login over the store.

Passwords are stored and compared in plaintext. This matches the existing
credential behavior of the service; hashing would change which stored
passwords are accepted and needs an explicit migration.
"""
from __future__ import annotations

import logging
from typing import Optional

from . import sessions
from .errors import AuthenticationError, ValidationError
from .identity import normalize
from .models import UserRecord
from .store import Store

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def register(store: Store, username: Optional[str], password: Optional[str]) -> UserRecord:
    """
    Create a user and an empty todo list, then persist.

    Raises:
        ValidationError: if the username is empty after trimming, or its
            canonical key is already taken.
    """
    display_username = str(username or "").strip()
    with store.lock:
        username_key = store.resolve_key(display_username) or normalize(display_username)
        if not username_key:
            raise ValidationError("Username is required")
        if store.get_user(username_key) is not None:
            raise ValidationError("Username already exists")

        user: UserRecord = {
            "username": display_username,
            "usernameKey": username_key,
            "password": password,
            "token": sessions.issue_token(),
            "id": len(store.users()) + 1,
        }
        store.put_user(username_key, user)
        store.put_todos(username_key, [])
        store.save()

    logger.info("Registered user %s (id=%s)", username_key, user["id"])
    return user


# PUBLIC_INTERFACE
def login(store: Store, username: Optional[str], password: Optional[str]) -> UserRecord:
    """
    Return the user matching the credentials.

    The current token is handed back unchanged; logging in from another
    client does not invalidate existing sessions.

    Raises:
        AuthenticationError: with the same message whether the username is
            unknown or the password is wrong.
    """
    display_username = str(username or "").strip()
    with store.lock:
        user_key = store.resolve_key(display_username) or normalize(display_username)
        user = store.get_user(user_key) if user_key else None

    if user is None or user.get("password") != password:
        logger.info("Rejected login attempt")
        raise AuthenticationError("Invalid credentials")
    return user


# PUBLIC_INTERFACE
def logout(store: Store, user: UserRecord) -> None:
    """Invalidate the user's current token by rotating it."""
    sessions.rotate(store, user)
    logger.info("Logged out user %s", user["usernameKey"])
