from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status

from .. import todo_service
from ..auth import get_current_user
from ..models import UserRecord
from ..schemas import TodoCreate, TodoOut, TodoUpdate
from ..store import Store, get_store

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
    responses={401: {"description": "Missing or invalid token"}},
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item for the caller and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
    },
)
def create_todo(
    payload: TodoCreate,
    user: UserRecord = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> TodoOut:
    """
    Create a new Todo.
    """
    created = todo_service.create(store, user, payload.title, payload.description, payload.completed)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List the caller's todos in the order they were created.",
    responses={200: {"description": "List retrieved successfully"}},
)
def list_todos(
    user: UserRecord = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> List[TodoOut]:
    return [TodoOut(**it) for it in todo_service.list_todos(store, user)]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Partially update one of the caller's todos. Empty or omitted title/description "
        "keep their current values; completed is applied whenever it is given."
    ),
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
    },
)
def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    user: UserRecord = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> TodoOut:
    updated = todo_service.update(
        store,
        todo_id,
        user,
        title=payload.title,
        description=payload.description,
        completed=payload.completed,
    )
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete one of the caller's todos.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(
    todo_id: str,
    user: UserRecord = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    todo_service.delete(store, todo_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
