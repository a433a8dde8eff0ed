from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that are reported to the client as {"error": message}."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or empty required input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ServiceError):
    """Missing or unknown token, or bad login credentials. Wording stays generic."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(ServiceError):
    """The todo id is not present in the caller's own list."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Todo not found") -> None:
        super().__init__(message)
