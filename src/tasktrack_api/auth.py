from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from . import sessions
from .errors import AuthenticationError
from .models import UserRecord
from .store import Store, get_store


# PUBLIC_INTERFACE
def get_current_user(
    authorization: Optional[str] = Header(default=None),
    store: Store = Depends(get_store),
) -> UserRecord:
    """
    FastAPI dependency resolving the Authorization header to a user.

    Accepts 'Bearer <token>' or the bare token.

    Raises:
        AuthenticationError: if the header is missing or the token is unknown.
    """
    user = sessions.resolve(store, sessions.extract_token(authorization))
    if user is None:
        raise AuthenticationError()
    return user
