"""Error classes raised by the data layer and auth helpers.

Each error carries the HTTP status it is surfaced as; `jobly.main` turns them
into `{"error": {"message": ..., "status": ...}}` responses.
"""
from typing import Any, Optional


class JoblyError(Exception):
    """Base exception for all Jobly errors."""

    status: int = 500

    def __init__(self, message: Any, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class BadRequestError(JoblyError):
    """400: the request payload or filters are invalid."""

    status = 400

    def __init__(self, message: Any = "Bad Request"):
        super().__init__(message)


class UnauthorizedError(JoblyError):
    """401: missing, invalid or insufficient credentials."""

    status = 401

    def __init__(self, message: Any = "Unauthorized"):
        super().__init__(message)


class NotFoundError(JoblyError):
    status = 404

    def __init__(self, message: Any = "Not Found"):
        super().__init__(message)
