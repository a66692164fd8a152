"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class UnauthorizedError(AppError):
    """Raised when the caller identity is missing from the request."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class InvalidAmountError(ValidationError):
    """Requested coin amount is non-positive or exceeds the available balance."""

    def __init__(self, amount: int, available: Optional[int] = None):
        if amount <= 0:
            message = f"coin_amount must be positive, got {amount}"
        else:
            message = f"coin_amount {amount} exceeds available balance {available}"
        super().__init__(message)
        self.amount = amount
        self.available = available


class IllegalStateError(AppError):
    """Operation attempted from a lifecycle state that forbids it."""

    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class EncodingSizeError(AppError):
    """Grid size cannot host the three reserved finder regions."""

    def __init__(self, grid_size: int):
        super().__init__(
            f"grid_size must be odd and at least 21, got {grid_size}", status_code=400
        )
        self.grid_size = grid_size


def to_response(error: AppError, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body: Dict[str, Any] = {"message": str(error), "status": "error"}
    if correlation_id:
        body["correlation_id"] = correlation_id
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }
