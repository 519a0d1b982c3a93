"""Unit tests for domain exceptions."""

import pytest

from src.core.exceptions import (
    ConfigurationError,
    DatabaseError,
    DuplicateSkuError,
    InsufficientStockError,
    InvalidInputError,
    MovementNotFoundError,
    NegativeStockRejectedError,
    NoConsumptionError,
    NotFoundError,
    ProductNotFoundError,
    StockControlError,
    StockRuleError,
    StorageError,
    SupplierNotFoundError,
    VendorNotFoundError,
)


class TestStockControlError:
    """Tests for the base exception."""

    def test_basic_initialization(self):
        error = StockControlError("Something broke")
        assert error.message == "Something broke"
        assert error.code == "StockControlError"
        assert error.details == {}
        assert str(error) == "Something broke"

    def test_custom_code_and_details(self):
        error = StockControlError("Broke", code="BROKE", details={"id": 1})
        assert error.code == "BROKE"
        assert error.details == {"id": 1}

    def test_to_dict(self):
        error = StockControlError("Broke", code="BROKE", details={"id": 1})
        assert error.to_dict() == {
            "error": "BROKE",
            "message": "Broke",
            "details": {"id": 1},
        }

    def test_subclass_without_code_uses_class_name(self):
        assert ConfigurationError("bad").code == "ConfigurationError"


class TestNotFoundErrors:
    """Lookup errors carry the missing id."""

    @pytest.mark.parametrize(
        ("exc_class", "code", "key"),
        [
            (ProductNotFoundError, "PRODUCT_NOT_FOUND", "product_id"),
            (MovementNotFoundError, "MOVEMENT_NOT_FOUND", "movement_id"),
            (SupplierNotFoundError, "SUPPLIER_NOT_FOUND", "supplier_id"),
            (VendorNotFoundError, "VENDOR_NOT_FOUND", "vendor_id"),
        ],
    )
    def test_code_and_details(self, exc_class, code, key):
        error = exc_class(42)
        assert isinstance(error, NotFoundError)
        assert error.code == code
        assert error.details == {key: 42}
        assert "42" in error.message


class TestInvalidInputError:
    def test_details(self):
        error = InvalidInputError("quantity", "must be greater than 0", -1)
        assert error.code == "INVALID_INPUT"
        assert error.details["field"] == "quantity"
        assert error.details["value"] == "-1"
        assert "quantity" in error.message

    def test_value_is_truncated(self):
        error = InvalidInputError("notes", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_missing_value(self):
        assert InvalidInputError("name", "is required").details["value"] is None


class TestStockRuleErrors:
    """Movements the ledger refuses to apply."""

    def test_insufficient_stock(self):
        error = InsufficientStockError(7, requested=10, available=5)
        assert isinstance(error, StockRuleError)
        assert error.code == "INSUFFICIENT_STOCK"
        assert error.details == {"product_id": 7, "requested": 10, "available": 5}

    def test_negative_stock_rejected(self):
        error = NegativeStockRejectedError(7, "delete", current=3, adjustment=-10)
        assert error.code == "NEGATIVE_STOCK_REJECTED"
        assert error.details["operation"] == "delete"
        assert "-7" in error.message

    def test_no_consumption(self):
        error = NoConsumptionError(5, 5)
        assert isinstance(error, StockRuleError)
        assert error.code == "NO_CONSUMPTION"
        assert error.details == {"quantity_out": 5, "quantity_return": 5}


class TestStorageErrors:
    def test_database_error(self):
        error = DatabaseError("insert_movement", "CHECK constraint failed")
        assert isinstance(error, StorageError)
        assert error.code == "DATABASE_ERROR"
        assert "insert_movement" in error.message

    def test_duplicate_sku(self):
        error = DuplicateSkuError("EST-ABC-123")
        assert isinstance(error, StorageError)
        assert error.code == "DUPLICATE_SKU"
        assert error.details == {"sku": "EST-ABC-123"}
