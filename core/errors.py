"""
Error taxonomy for request handlers.

Every error carries a human-readable message and the HTTP status it maps to;
``main.create_app`` turns them into ``{"error": message}`` bodies.
"""
from typing import Optional


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(AppError):
    """Missing or malformed client input."""
    status_code = 400


class NotFoundError(AppError):
    """A slot the operation depends on is empty."""
    status_code = 400


class ExternalServiceError(AppError):
    """PDF extraction or the completion service failed."""
    status_code = 500


class StorageError(AppError):
    """Writing or deleting a slot file failed."""
    status_code = 500
