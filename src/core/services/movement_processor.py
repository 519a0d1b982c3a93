"""
Movement processor.

Validates and applies stock movements against the product ledger:
entries recompute the weighted-average cost, exits and losses draw stock
down, and edits or deletes of past movements reverse their effect on the
current balance.

Every mutation runs inside ``IInventoryStore.transaction(product_id)``,
which serializes work on one product and commits the product balance and
the movement row together. Any exception raised inside the block rolls
both back.
"""

from dataclasses import dataclass

from src.config import get_logger
from src.core.entities.movement import Movement, MovementType
from src.core.entities.partner import Vendor
from src.core.entities.product import Product, utc_now
from src.core.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    MovementNotFoundError,
    NegativeStockRejectedError,
    NoConsumptionError,
    ProductNotFoundError,
)
from src.core.interfaces.inventory_store import IInventoryStore
from src.core.interfaces.partner_store import IVendorStore
from src.core.services.stock_ledger import (
    COST_DECIMALS,
    QUANTITY_DECIMALS,
    consumption,
    edit_adjustment,
    entry_notes,
    exit_return_notes,
    replay_movements,
    require_non_negative,
    require_positive,
    reversal_effect,
    round_half_up,
    weighted_average_cost,
)

logger = get_logger(__name__)


@dataclass
class EntryResult:
    """Result of recording an entry."""

    product: Product
    movement: Movement
    previous_cost: float
    new_average_cost: float


@dataclass
class StockResult:
    """Result of recording an exit or a loss."""

    product: Product
    movement: Movement


@dataclass
class ExitReturnResult:
    """Result of an exit where part of the stock came back."""

    product: Product
    movement: Movement
    consumed: float


@dataclass
class EditResult:
    movement: Movement
    inventory_change: float
    new_inventory: float


@dataclass
class DeleteResult:
    movement_id: int
    inventory_change: float
    new_inventory: float


@dataclass
class LedgerCheck:
    """Stored balance compared with a replay of the product's history."""

    product_id: int
    stored_quantity: float
    stored_cost_price: float
    replayed_quantity: float
    replayed_cost_price: float
    entries_replayed: int
    quantity_matches: bool
    cost_matches: bool

    @property
    def consistent(self) -> bool:
        return self.quantity_matches and self.cost_matches


class MovementProcessor:
    """
    Applies entry / exit / loss / exit-with-return movements and reconciles
    edits and deletes against the current balance.

    Pure service: stores are injected, no infrastructure imports.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore,
        vendor_store: IVendorStore | None = None,
        *,
        cost_decimals: int = COST_DECIMALS,
        quantity_decimals: int = QUANTITY_DECIMALS,
    ):
        self._store = inventory_store
        self._vendor_store = vendor_store
        self._cost_decimals = cost_decimals
        self._quantity_decimals = quantity_decimals

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def record_entry(
        self,
        product_id: int,
        quantity: float,
        unit_cost: float | None = None,
        vendor_id: int | None = None,
        notes: str | None = None,
    ) -> EntryResult:
        """
        Record stock coming in and recompute the weighted-average cost.

        Args:
            product_id: Product receiving the stock.
            quantity: Quantity received, > 0.
            unit_cost: Purchase cost per unit. None falls back to the
                product's current cost_price.
            vendor_id: Vendor the stock was bought from. Unknown vendors
                are ignored.
            notes: Free text, prefixed with the vendor name when resolved.

        Raises:
            InvalidInputError: quantity <= 0 or unit_cost < 0.
            ProductNotFoundError: product_id does not exist.
        """
        quantity = self._quantity("quantity", quantity)
        if unit_cost is not None:
            unit_cost = require_non_negative("unit_cost", unit_cost)

        # Resolved before taking the product lock
        vendor = await self._resolve_vendor(vendor_id)

        async with self._store.transaction(product_id) as tx:
            product = await self._require_product(tx, product_id)

            entry_cost = unit_cost if unit_cost is not None else product.cost_price
            previous_cost = product.cost_price
            new_cost = weighted_average_cost(
                product.quantity,
                product.cost_price,
                quantity,
                entry_cost,
                self._cost_decimals,
            )
            new_quantity = self._round(product.quantity + quantity)

            await tx.update_product_stock(product_id, new_quantity, new_cost)
            movement = await tx.insert_movement(
                Movement(
                    product_id=product_id,
                    type=MovementType.ENTRY,
                    quantity=quantity,
                    unit_cost=entry_cost,
                    notes=entry_notes(vendor.name if vendor else None, notes),
                    vendor_id=vendor.id if vendor else None,
                )
            )

        logger.info(
            "entry_recorded",
            product_id=product_id,
            movement_id=movement.id,
            quantity=quantity,
            unit_cost=entry_cost,
            new_quantity=new_quantity,
            previous_cost=previous_cost,
            new_cost=new_cost,
        )

        return EntryResult(
            product=self._with_balance(product, new_quantity, new_cost),
            movement=movement,
            previous_cost=previous_cost,
            new_average_cost=new_cost,
        )

    async def record_exit(
        self, product_id: int, quantity: float, notes: str | None = None
    ) -> StockResult:
        """Record stock leaving for use. Cost price is not recomputed."""
        return await self._record_outbound(MovementType.EXIT, product_id, quantity, notes)

    async def record_loss(
        self, product_id: int, quantity: float, notes: str | None = None
    ) -> StockResult:
        """Record stock lost or damaged. Cost price is not recomputed."""
        return await self._record_outbound(MovementType.LOSS, product_id, quantity, notes)

    async def record_exit_with_return(
        self,
        product_id: int,
        quantity_out: float,
        quantity_return: float,
        notes: str | None = None,
    ) -> ExitReturnResult:
        """
        Record an exit where part of what left came back unused.

        Only the consumed quantity (out - return) is drawn from stock, as a
        single EXIT movement whose notes describe the three quantities.

        Raises:
            InvalidInputError: quantity_out <= 0, quantity_return < 0 or
                quantity_return > quantity_out.
            ProductNotFoundError: product_id does not exist.
            NoConsumptionError: nothing was consumed.
            InsufficientStockError: consumed exceeds stock on hand.
        """
        quantity_out = require_positive("quantity_out", quantity_out)
        quantity_return = require_non_negative("quantity_return", quantity_return)
        if quantity_return > quantity_out:
            raise InvalidInputError(
                "quantity_return",
                "cannot exceed quantity_out",
                quantity_return,
            )

        async with self._store.transaction(product_id) as tx:
            product = await self._require_product(tx, product_id)

            consumed = consumption(quantity_out, quantity_return, self._quantity_decimals)
            if consumed <= 0:
                raise NoConsumptionError(quantity_out, quantity_return)
            if product.quantity < consumed:
                raise InsufficientStockError(product_id, consumed, product.quantity)

            new_quantity = self._round(product.quantity - consumed)
            await tx.update_product_stock(product_id, new_quantity)
            movement = await tx.insert_movement(
                Movement(
                    product_id=product_id,
                    type=MovementType.EXIT,
                    quantity=consumed,
                    unit_cost=product.cost_price,
                    notes=exit_return_notes(
                        quantity_out,
                        quantity_return,
                        consumed,
                        product.unit_type,
                        notes,
                    ),
                )
            )

        logger.info(
            "exit_with_return_recorded",
            product_id=product_id,
            movement_id=movement.id,
            quantity_out=quantity_out,
            quantity_return=quantity_return,
            consumed=consumed,
            new_quantity=new_quantity,
        )

        return ExitReturnResult(
            product=self._with_balance(product, new_quantity),
            movement=movement,
            consumed=consumed,
        )

    async def _record_outbound(
        self,
        movement_type: MovementType,
        product_id: int,
        quantity: float,
        notes: str | None,
    ) -> StockResult:
        quantity = self._quantity("quantity", quantity)

        async with self._store.transaction(product_id) as tx:
            product = await self._require_product(tx, product_id)

            if product.quantity < quantity:
                logger.warning(
                    "insufficient_stock",
                    product_id=product_id,
                    type=movement_type.value,
                    requested=quantity,
                    available=product.quantity,
                )
                raise InsufficientStockError(product_id, quantity, product.quantity)

            new_quantity = self._round(product.quantity - quantity)
            await tx.update_product_stock(product_id, new_quantity)
            movement = await tx.insert_movement(
                Movement(
                    product_id=product_id,
                    type=movement_type,
                    quantity=quantity,
                    unit_cost=product.cost_price,
                    notes=notes or None,
                )
            )

        logger.info(
            f"{movement_type.value}_recorded",
            product_id=product_id,
            movement_id=movement.id,
            quantity=quantity,
            new_quantity=new_quantity,
        )

        return StockResult(
            product=self._with_balance(product, new_quantity),
            movement=movement,
        )

    # ------------------------------------------------------------------
    # Edit / delete
    # ------------------------------------------------------------------

    async def edit_movement(
        self,
        movement_id: int,
        quantity: float | None = None,
        unit_cost: float | None = None,
        notes: str | None = None,
    ) -> EditResult:
        """
        Correct a past movement in place.

        The old quantity's effect is reversed and the new one applied, as a
        single adjustment to the product balance. Omitted fields keep their
        stored value; an empty notes string clears the notes. cost_price is
        never recomputed here, even for entries.

        Raises:
            InvalidInputError: quantity <= 0 or unit_cost < 0.
            MovementNotFoundError: movement_id does not exist.
            NegativeStockRejectedError: the adjustment would leave the
                product below zero. Nothing is changed.
        """
        if quantity is not None:
            quantity = self._quantity("quantity", quantity)
        if unit_cost is not None:
            unit_cost = require_non_negative("unit_cost", unit_cost)

        product_id = await self._product_of(movement_id)

        async with self._store.transaction(product_id) as tx:
            movement = await self._require_movement(tx, movement_id)
            product = await self._require_product(tx, movement.product_id)

            new_quantity = quantity if quantity is not None else movement.quantity
            adjustment = edit_adjustment(
                movement.type,
                movement.quantity,
                new_quantity,
                self._quantity_decimals,
            )
            new_inventory = self._round(product.quantity + adjustment)
            if new_inventory < 0:
                logger.warning(
                    "movement_edit_rejected",
                    movement_id=movement_id,
                    product_id=product.id,
                    current=product.quantity,
                    adjustment=adjustment,
                )
                raise NegativeStockRejectedError(
                    product.id,  # type: ignore[arg-type]
                    "edit",
                    product.quantity,
                    adjustment,
                )

            updated = movement.model_copy(
                update={
                    "quantity": new_quantity,
                    "unit_cost": unit_cost if unit_cost is not None else movement.unit_cost,
                    "notes": (notes or None) if notes is not None else movement.notes,
                }
            )
            updated = await tx.update_movement(updated)
            if adjustment != 0:
                await tx.update_product_stock(movement.product_id, new_inventory)

        logger.info(
            "movement_edited",
            movement_id=movement_id,
            product_id=movement.product_id,
            old_quantity=movement.quantity,
            new_quantity=new_quantity,
            inventory_change=adjustment,
            new_inventory=new_inventory,
        )

        return EditResult(
            movement=updated,
            inventory_change=adjustment,
            new_inventory=new_inventory,
        )

    async def delete_movement(self, movement_id: int) -> DeleteResult:
        """
        Delete a movement and reverse its effect on the balance.

        Raises:
            MovementNotFoundError: movement_id does not exist.
            NegativeStockRejectedError: reversing an entry would leave the
                product below zero. The delete is blocked, not forced.
        """
        product_id = await self._product_of(movement_id)

        async with self._store.transaction(product_id) as tx:
            movement = await self._require_movement(tx, movement_id)
            product = await self._require_product(tx, movement.product_id)

            change = self._round(reversal_effect(movement.type, movement.quantity))
            new_inventory = self._round(product.quantity + change)
            if new_inventory < 0:
                logger.warning(
                    "movement_delete_rejected",
                    movement_id=movement_id,
                    product_id=product.id,
                    current=product.quantity,
                    adjustment=change,
                )
                raise NegativeStockRejectedError(
                    product.id,  # type: ignore[arg-type]
                    "delete",
                    product.quantity,
                    change,
                )

            await tx.delete_movement(movement_id)
            await tx.update_product_stock(movement.product_id, new_inventory)

        logger.info(
            "movement_deleted",
            movement_id=movement_id,
            product_id=movement.product_id,
            type=movement.type.value,
            inventory_change=change,
            new_inventory=new_inventory,
        )

        return DeleteResult(
            movement_id=movement_id,
            inventory_change=change,
            new_inventory=new_inventory,
        )

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    async def verify_product_ledger(self, product_id: int) -> LedgerCheck:
        """
        Replay a product's movement history from zero and compare the
        result with the stored balance.

        Edits and direct cost_price changes legitimately make the cost
        diverge; this only reports, it never repairs.
        """
        async with self._store.transaction(product_id) as tx:
            product = await self._require_product(tx, product_id)
            history = await tx.list_product_movements(product_id)

        replay = replay_movements(history, self._cost_decimals, self._quantity_decimals)
        quantity_matches = self._round(replay.quantity) == self._round(product.quantity)
        cost_matches = replay.entries == 0 or (
            round_half_up(replay.cost_price, self._cost_decimals)
            == round_half_up(product.cost_price, self._cost_decimals)
        )

        if not (quantity_matches and cost_matches):
            logger.warning(
                "ledger_mismatch",
                product_id=product_id,
                stored_quantity=product.quantity,
                replayed_quantity=replay.quantity,
                stored_cost=product.cost_price,
                replayed_cost=replay.cost_price,
            )

        return LedgerCheck(
            product_id=product_id,
            stored_quantity=product.quantity,
            stored_cost_price=product.cost_price,
            replayed_quantity=replay.quantity,
            replayed_cost_price=replay.cost_price,
            entries_replayed=replay.entries,
            quantity_matches=quantity_matches,
            cost_matches=cost_matches,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _round(self, value: float) -> float:
        return round_half_up(value, self._quantity_decimals)

    def _quantity(self, field: str, value: float) -> float:
        """Validate a movement quantity and snap it to the stored precision."""
        value = self._round(require_positive(field, value))
        if value <= 0:
            step = 10 ** -self._quantity_decimals
            raise InvalidInputError(field, f"must be at least {step:g}", value)
        return value

    @staticmethod
    async def _require_product(store: IInventoryStore, product_id: int) -> Product:
        product = await store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    @staticmethod
    async def _require_movement(store: IInventoryStore, movement_id: int) -> Movement:
        movement = await store.get_movement(movement_id)
        if movement is None:
            raise MovementNotFoundError(movement_id)
        return movement

    async def _product_of(self, movement_id: int) -> int:
        """Peek at a movement to learn which product lock to take."""
        movement = await self._require_movement(self._store, movement_id)
        return movement.product_id

    async def _resolve_vendor(self, vendor_id: int | None) -> Vendor | None:
        if vendor_id is None:
            return None
        vendor = None
        if self._vendor_store is not None:
            vendor = await self._vendor_store.get_vendor(vendor_id)
        if vendor is None:
            logger.warning("entry_vendor_unresolved", vendor_id=vendor_id)
        return vendor

    @staticmethod
    def _with_balance(
        product: Product, quantity: float, cost_price: float | None = None
    ) -> Product:
        update: dict = {"quantity": quantity, "updated_at": utc_now()}
        if cost_price is not None:
            update["cost_price"] = cost_price
        return product.model_copy(update=update)
