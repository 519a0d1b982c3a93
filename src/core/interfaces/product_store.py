"""Abstract interface for the product catalog."""

from abc import ABC, abstractmethod
from typing import Any

from src.core.entities.product import Product, ProductFilter


class IProductStore(ABC):
    """Interface for product catalog persistence.

    Never writes quantity: balances belong to the movement processor.
    """

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a new product."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID, with supplier name joined."""
        pass

    @abstractmethod
    async def get_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU."""
        pass

    @abstractmethod
    async def list_products(self, filters: ProductFilter) -> list[Product]:
        """List products matching the filter, ordered by name."""
        pass

    @abstractmethod
    async def update_product(self, product_id: int, changes: dict[str, Any]) -> Product | None:
        """
        Write only the given catalog columns (never sku or quantity).

        Serialized with movements on the same product, so a catalog edit
        cannot overwrite a cost_price written by a concurrent entry.
        Returns None when the product does not exist.
        """
        pass

    @abstractmethod
    async def set_active(self, product_id: int, is_active: bool) -> None:
        """Set the active flag."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: int) -> bool:
        """Delete product and, by cascade, its movements."""
        pass
