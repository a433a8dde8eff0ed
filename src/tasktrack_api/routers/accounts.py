from __future__ import annotations

from fastapi import APIRouter, Depends, status

from .. import accounts
from ..auth import get_current_user
from ..models import UserRecord
from ..schemas import Credentials, MessageOut, SessionOut, UserOut
from ..store import Store, get_store

router = APIRouter(tags=["auth"])


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account and return its first session token.",
    responses={
        201: {"description": "User registered"},
        400: {"description": "Username missing or already taken"},
    },
)
def register(payload: Credentials, store: Store = Depends(get_store)) -> SessionOut:
    user = accounts.register(store, payload.username, payload.password)
    return SessionOut(id=user["id"], username=user["username"], token=user["token"])


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=SessionOut,
    summary="Log in",
    description="Exchange username and password for the account's current token.",
    responses={
        200: {"description": "Logged in"},
        401: {"description": "Invalid credentials"},
    },
)
def login(payload: Credentials, store: Store = Depends(get_store)) -> SessionOut:
    """
    The username in the response is echoed exactly as submitted.
    """
    user = accounts.login(store, payload.username, payload.password)
    return SessionOut(id=user["id"], username=payload.username or "", token=user["token"])


# PUBLIC_INTERFACE
@router.post(
    "/logout",
    response_model=MessageOut,
    summary="Log out",
    description="Rotate the caller's token so every copy of it stops working.",
    responses={401: {"description": "Missing or invalid token"}},
)
def logout(
    user: UserRecord = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> MessageOut:
    accounts.logout(store, user)
    return MessageOut(message="Logged out successfully")


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=UserOut,
    summary="Current user",
    responses={401: {"description": "Missing or invalid token"}},
)
def me(user: UserRecord = Depends(get_current_user)) -> UserOut:
    return UserOut(id=user["id"], username=user["username"])
