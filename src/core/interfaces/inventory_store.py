"""Abstract interface for the product ledger and movement log."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from src.core.entities.movement import Movement, MovementFilter, MovementRecord
from src.core.entities.product import Product


class IInventoryStore(ABC):
    """
    Interface for product balances and the movement log.

    Mutations made through the store returned by ``transaction()`` are
    committed together when the block exits normally and rolled back when
    it raises. Outside a transaction every write commits on its own.
    """

    @abstractmethod
    def transaction(
        self, product_id: int
    ) -> AbstractAsyncContextManager["IInventoryStore"]:
        """
        Open a write transaction serialized per product.

        Usage:
            async with store.transaction(product_id) as tx:
                product = await tx.get_product(product_id)
                ...
        """
        pass

    # Product ledger
    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def update_product_stock(
        self,
        product_id: int,
        quantity: float,
        cost_price: float | None = None,
    ) -> None:
        """Set product quantity (and cost_price when given), touching updated_at."""
        pass

    # Movement log
    @abstractmethod
    async def insert_movement(self, movement: Movement) -> Movement:
        """Persist a movement and return it with its generated ID."""
        pass

    @abstractmethod
    async def get_movement(self, movement_id: int) -> Movement | None:
        """Get movement by ID."""
        pass

    @abstractmethod
    async def update_movement(self, movement: Movement) -> Movement:
        """Persist quantity, unit_cost and notes of an existing movement."""
        pass

    @abstractmethod
    async def delete_movement(self, movement_id: int) -> bool:
        """Delete movement. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def get_movement_record(self, movement_id: int) -> MovementRecord | None:
        """Get movement joined with its product."""
        pass

    @abstractmethod
    async def list_movements(self, filters: MovementFilter) -> list[MovementRecord]:
        """List movements matching the filter, newest first."""
        pass

    @abstractmethod
    async def list_product_movements(self, product_id: int) -> list[Movement]:
        """All movements of a product in creation order (oldest first)."""
        pass
