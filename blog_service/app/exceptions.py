from __future__ import annotations


class BlogServiceError(Exception):
    """Base exception for all blog-service errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BlogServiceError):
    """Malformed client input (e.g., like delta other than 1/-1, missing upload file)."""

    status_code = 400


class NotFoundError(BlogServiceError):
    """The requested post does not exist (or its id cannot be an ObjectId)."""

    status_code = 404


class PersistenceError(BlogServiceError):
    """Store unreachable or write failure. The message is safe to return to clients."""

    status_code = 500
