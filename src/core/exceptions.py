"""
Domain exceptions for the stock control application.

Every error the ledger can raise is recoverable at the request boundary:
the surrounding transaction is rolled back and the error is reported to
the caller with a machine-readable code.
"""

from typing import Any


class StockControlError(Exception):
    """Base exception for all stock control errors."""

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


# Lookup Exceptions
class NotFoundError(StockControlError):
    """Referenced entity does not exist."""

    pass


class ProductNotFoundError(NotFoundError):
    """Product not found in storage."""

    def __init__(self, product_id: int):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class MovementNotFoundError(NotFoundError):
    """Movement not found in storage."""

    def __init__(self, movement_id: int):
        super().__init__(
            f"Movement not found: {movement_id}",
            code="MOVEMENT_NOT_FOUND",
            details={"movement_id": movement_id},
        )


class SupplierNotFoundError(NotFoundError):
    """Supplier not found in storage."""

    def __init__(self, supplier_id: int):
        super().__init__(
            f"Supplier not found: {supplier_id}",
            code="SUPPLIER_NOT_FOUND",
            details={"supplier_id": supplier_id},
        )


class VendorNotFoundError(NotFoundError):
    """Vendor not found in storage."""

    def __init__(self, vendor_id: int):
        super().__init__(
            f"Vendor not found: {vendor_id}",
            code="VENDOR_NOT_FOUND",
            details={"vendor_id": vendor_id},
        )


# Input Exceptions
class InvalidInputError(StockControlError):
    """Input rejected before touching the ledger."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Invalid value for '{field}': {message}",
            code="INVALID_INPUT",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Stock Rule Exceptions
class StockRuleError(StockControlError):
    """Base exception for movements the ledger refuses to apply."""

    pass


class InsufficientStockError(StockRuleError):
    """Exit, loss or exit-with-return would drive quantity below zero."""

    def __init__(self, product_id: int, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )


class NegativeStockRejectedError(StockRuleError):
    """Editing or deleting a past movement would drive quantity below zero."""

    def __init__(
        self,
        product_id: int,
        operation: str,
        current: float,
        adjustment: float,
    ):
        super().__init__(
            f"Cannot {operation} movement: product {product_id} would go to "
            f"{round(current + adjustment, 3)} (current {current}, change {adjustment})",
            code="NEGATIVE_STOCK_REJECTED",
            details={
                "product_id": product_id,
                "operation": operation,
                "current": current,
                "adjustment": adjustment,
            },
        )


class NoConsumptionError(StockRuleError):
    """Exit-with-return where nothing was consumed."""

    def __init__(self, quantity_out: float, quantity_return: float):
        super().__init__(
            f"No consumption: {quantity_out} out, {quantity_return} returned",
            code="NO_CONSUMPTION",
            details={
                "quantity_out": quantity_out,
                "quantity_return": quantity_return,
            },
        )


# Storage Exceptions
class StorageError(StockControlError):
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


class DuplicateSkuError(StorageError):
    """Product with the same SKU already exists."""

    def __init__(self, sku: str):
        super().__init__(
            f"Product already exists with SKU: {sku}",
            code="DUPLICATE_SKU",
            details={"sku": sku},
        )


class ConfigurationError(StockControlError):
    """Configuration error."""

    pass
