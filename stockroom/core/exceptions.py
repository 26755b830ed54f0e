"""
Domain exceptions for the Stockroom service.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class StockroomError(Exception):
    """Base exception for all Stockroom errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(StockroomError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class MigrationError(StorageError):
    """A schema migration could not be applied or verified."""

    def __init__(self, version: str, error: str):
        super().__init__(
            f"Migration v{version} failed: {error}",
            code="MIGRATION_FAILED",
            details={"version": version, "error": error},
        )


class PartialCascadeFailureError(StorageError):
    """Item was soft-deleted but its batches could not be.

    The item-level write has already committed; callers must treat the
    delete as partially applied. Repeating the delete completes it.
    """

    def __init__(self, item_id: str, error: str):
        super().__init__(
            f"Item {item_id} was deleted but its batches were not: {error}",
            code="PARTIAL_CASCADE_FAILURE",
            details={"item_id": item_id, "error": error},
        )


# Lookup Exceptions
class NotFoundError(StockroomError):
    """Referenced record does not exist."""

    pass


class ItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    def __init__(self, item_id: str):
        super().__init__(
            f"Inventory item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class BatchNotFoundError(NotFoundError):
    """Batch not found."""

    def __init__(self, batch_id: str):
        super().__init__(
            f"Batch not found: {batch_id}",
            code="BATCH_NOT_FOUND",
            details={"batch_id": batch_id},
        )


class CategoryNotFoundError(NotFoundError):
    """No category row exists for a classification."""

    def __init__(self, category: Any):
        super().__init__(
            f"Category not found for {category}",
            code="CATEGORY_NOT_FOUND",
            details={"category": category},
        )


# Validation Exceptions
class ValidationError(StockroomError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class ConfigurationError(StockroomError):
    """Configuration error."""

    pass
