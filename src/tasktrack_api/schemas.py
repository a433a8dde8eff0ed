from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class Credentials(BaseModel):
    """
    Body for /register and /login.

    Both fields are optional at the schema level so that an empty username is
    reported by the service as 400 'Username is required'.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "Alice", "password": "s3cret"}}
    )

    username: Optional[str] = Field(default=None, description="Username; case and surrounding whitespace are ignored for lookup")
    password: Optional[str] = Field(default=None, description="Account password")


# PUBLIC_INTERFACE
class SessionOut(BaseModel):
    """Returned by /register and /login."""

    id: int = Field(..., description="Sequential user id")
    username: str = Field(..., description="Display username")
    token: str = Field(..., description="Bearer token for the Authorization header")


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """Returned by /me."""

    id: int = Field(..., description="Sequential user id")
    username: str = Field(..., description="Display username as registered")


# PUBLIC_INTERFACE
class MessageOut(BaseModel):
    message: str


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
            }
        }
    )

    title: str = Field(..., description="Short title for the todo item", min_length=1)
    description: str = Field(..., description="Detailed description", min_length=1)
    completed: Optional[bool] = Field(default=False, description="Completion status flag; null is treated as false")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional. Empty title/description strings are treated as
    omitted and leave the stored value unchanged.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "completed": True,
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    description: Optional[str] = Field(default=None, description="Detailed description")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "9f86d081884c7d659a2feaa0c55ad015",
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": True,
                "createdAt": "2025-01-25T10:15:30.123Z",
                "editedAt": None,
                "completedAt": "2025-01-25T10:15:30.123Z",
            }
        }
    )

    id: str = Field(..., description="Opaque unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    description: str = Field(..., description="Detailed description")
    completed: bool = Field(..., description="Completion status flag")
    createdAt: Optional[str] = Field(default=None, description="Creation timestamp (UTC ISO8601); null only for records migrated without one")
    editedAt: Optional[str] = Field(default=None, description="Last edit timestamp, null if never edited")
    completedAt: Optional[str] = Field(default=None, description="Completion timestamp, null while not completed")
