"""
Custom Exception Classes for the Funnel.vc API.

Provides standardized HTTP exceptions with consistent error messages
across all API endpoints.
"""
from typing import Union

from fastapi import HTTPException, status


class UnauthorizedError(HTTPException):
    """Exception raised when the caller has no verified identity."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundError(HTTPException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource: str, id: str = None):
        detail = f"{resource} not found" + (f": {id}" if id else "")
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthorizationError(HTTPException):
    """Exception raised when a user is not authorized to access a resource."""

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


class ValidationError(HTTPException):
    """
    Exception raised when request validation fails.

    ``message`` is either a single string or an itemized list of
    ``{"field": ..., "message": ...}`` entries.
    """

    def __init__(self, message: Union[str, list[dict[str, str]]]):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class ExtractionError(HTTPException):
    """Exception raised when pitch deck text cannot be extracted."""

    def __init__(self, message: str = "Failed to process pitch deck PDF."):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class ConflictError(HTTPException):
    """Exception raised when a resource conflict occurs (e.g., duplicate)."""

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=message)


class UpstreamServiceError(HTTPException):
    """Exception raised when an external service fails with no safe default."""

    def __init__(self, message: str = "Upstream service unavailable. Please try again later."):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=message)


def format_validation_errors(errors: list[dict]) -> list[dict[str, str]]:
    """
    Flatten pydantic error dicts into ``{"field", "message"}`` items.

    The ``body``/``query`` location prefix FastAPI adds is dropped.
    """
    items = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        items.append({"field": ".".join(loc) or "body", "message": message})
    return items
