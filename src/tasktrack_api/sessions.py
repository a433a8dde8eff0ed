from __future__ import annotations

import secrets
from typing import Optional

from .models import UserRecord
from .store import Store

TOKEN_BYTES = 32


# PUBLIC_INTERFACE
def issue_token() -> str:
    """Return a fresh session token: 32 random bytes from `secrets`, hex-encoded."""
    return secrets.token_hex(TOKEN_BYTES)


# PUBLIC_INTERFACE
def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header value.

    Accepts 'Bearer <token>' or the raw token. Returns None when nothing usable is present.
    """
    if not authorization:
        return None
    token = authorization[len("Bearer "):] if authorization.startswith("Bearer ") else authorization
    return token or None


# PUBLIC_INTERFACE
def resolve(store: Store, token: Optional[str]) -> Optional[UserRecord]:
    """Return the user currently holding `token`, or None. Tokens never expire on their own."""
    if not token:
        return None
    return store.find_user_by_token(token)


# PUBLIC_INTERFACE
def rotate(store: Store, user: UserRecord) -> str:
    """
    Replace the user's token with a new one and persist the change.

    The previous token stops resolving immediately for every holder.
    """
    with store.lock:
        user["token"] = issue_token()
        store.put_user(user["usernameKey"], user)
        store.save()
        return user["token"]
