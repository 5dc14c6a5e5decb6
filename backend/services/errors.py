# backend/services/errors.py
from typing import Optional

# Error kinds returned to callers
INVALID_INPUT = "InvalidInput"
NOT_FOUND = "NotFound"
INSUFFICIENT_STOCK = "InsufficientStock"
CONFLICT_ON_ALLOCATION = "ConflictOnAllocation"
STORAGE_ERROR = "StorageError"


class InventoryError(Exception):
    """Base class for every failure the stock services report.

    Carries a ``kind`` (one of the constants above), a message safe to show
    to a user and the HTTP status the API layer answers with.
    """

    kind = STORAGE_ERROR
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InvalidInput(InventoryError):
    kind = INVALID_INPUT
    status_code = 400


class NotFound(InventoryError):
    kind = NOT_FOUND
    status_code = 404


class InsufficientStock(InventoryError):
    kind = INSUFFICIENT_STOCK
    status_code = 400

    def __init__(self, max_available: int, message: Optional[str] = None):
        super().__init__(message or f"Not enough stock available. Maximum available: {max_available}")
        self.max_available = max_available


class ConflictOnAllocation(InventoryError):
    kind = CONFLICT_ON_ALLOCATION
    status_code = 409


class StorageError(InventoryError):
    kind = STORAGE_ERROR
    status_code = 500
