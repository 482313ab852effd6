from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base app error."""

    def __init__(self, message: str = "", details: Optional[list[dict]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    pass


class UnknownReferenceError(ValidationError):
    pass


class InsufficientStockError(ValidationError):
    pass


class TotalsMismatchError(ValidationError):
    pass


class NotFoundError(AppError):
    pass
