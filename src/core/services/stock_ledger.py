"""
Stock ledger arithmetic.

Pure functions shared by the movement processor and the ledger replay
check. No I/O, no logging.

Conventions:
- every new balance is rounded half-up: costs to 2 decimals, quantities
  to 3 decimals (both configurable by the caller);
- rounding happens at each step, never deferred, so replaying history
  through these functions reproduces the stored balance.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from src.core.entities.movement import Movement, MovementType
from src.core.entities.product import UnitType
from src.core.exceptions import InvalidInputError

COST_DECIMALS = 2
QUANTITY_DECIMALS = 3

# Signed direction each movement type applies to product quantity
STOCK_EFFECT_SIGN: dict[MovementType, int] = {
    MovementType.ENTRY: 1,
    MovementType.EXIT: -1,
    MovementType.LOSS: -1,
}


def round_half_up(value: float, decimals: int) -> float:
    """Round like a cash register, not like float's banker's rounding."""
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    # + 0.0 folds -0.0 into 0.0
    return float(rounded) + 0.0


def round_quantity(value: float, decimals: int = QUANTITY_DECIMALS) -> float:
    return round_half_up(value, decimals)


def round_cost(value: float, decimals: int = COST_DECIMALS) -> float:
    return round_half_up(value, decimals)


def require_positive(field: str, value: float | None) -> float:
    """Reject missing, non-finite or non-positive quantities."""
    if value is None:
        raise InvalidInputError(field, "is required")
    if isinstance(value, bool) or not math.isfinite(value):
        raise InvalidInputError(field, "must be a finite number", value)
    if value <= 0:
        raise InvalidInputError(field, "must be greater than zero", value)
    return float(value)


def require_non_negative(field: str, value: float | None) -> float:
    if value is None:
        raise InvalidInputError(field, "is required")
    if isinstance(value, bool) or not math.isfinite(value):
        raise InvalidInputError(field, "must be a finite number", value)
    if value < 0:
        raise InvalidInputError(field, "must not be negative", value)
    return float(value)


def stock_effect(movement_type: MovementType, quantity: float) -> float:
    """Signed quantity delta: entry +q, exit/loss -q."""
    return STOCK_EFFECT_SIGN[movement_type] * quantity


def reversal_effect(movement_type: MovementType, quantity: float) -> float:
    """Delta that undoes a movement: entry -q, exit/loss +q."""
    return -stock_effect(movement_type, quantity)


def edit_adjustment(
    movement_type: MovementType,
    old_quantity: float,
    new_quantity: float,
    decimals: int = QUANTITY_DECIMALS,
) -> float:
    """Net delta of reversing the old quantity and re-applying the new one.

    entry: new - old; exit/loss: old - new.
    """
    reversal = reversal_effect(movement_type, old_quantity)
    reapply = stock_effect(movement_type, new_quantity)
    return round_quantity(reversal + reapply, decimals)


def weighted_average_cost(
    current_quantity: float,
    current_cost: float,
    entry_quantity: float,
    entry_cost: float,
    decimals: int = COST_DECIMALS,
) -> float:
    """Value-weighted mean of stock on hand and an incoming entry."""
    new_quantity = current_quantity + entry_quantity
    if new_quantity == 0:
        return round_cost(entry_cost, decimals)
    total_value = current_quantity * current_cost + entry_quantity * entry_cost
    return round_cost(total_value / new_quantity, decimals)


def consumption(
    quantity_out: float,
    quantity_return: float,
    decimals: int = QUANTITY_DECIMALS,
) -> float:
    """Quantity actually used when part of an exit came back."""
    return round_quantity(quantity_out - quantity_return, decimals)


def format_quantity(value: float, decimals: int = QUANTITY_DECIMALS) -> str:
    """Render without trailing zeros: 7.0 -> "7", 2.50 -> "2.5"."""
    text = f"{round_quantity(value, decimals):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def exit_return_notes(
    quantity_out: float,
    quantity_return: float,
    consumed: float,
    unit_type: UnitType,
    notes: str | None = None,
) -> str:
    """Notes for an exit-with-return, e.g. "Saiu: 10un | Retornou: 3un | Consumo: 7un"."""
    unit = unit_type.label
    text = (
        f"Saiu: {format_quantity(quantity_out)}{unit} | "
        f"Retornou: {format_quantity(quantity_return)}{unit} | "
        f"Consumo: {format_quantity(consumed)}{unit}"
    )
    if notes:
        text = f"{text} | {notes}"
    return text


def entry_notes(vendor_name: str | None, notes: str | None) -> str | None:
    """Prefix entry notes with the vendor the stock was bought from."""
    if not vendor_name:
        return notes or None
    prefix = f"Fornecedor: {vendor_name}"
    return f"{prefix} | {notes}" if notes else prefix


@dataclass
class LedgerReplay:
    """Balance reconstructed from a movement history."""

    quantity: float = 0.0
    cost_price: float = 0.0
    entries: int = 0
    went_negative: bool = False


def replay_movements(
    movements: Iterable[Movement],
    cost_decimals: int = COST_DECIMALS,
    quantity_decimals: int = QUANTITY_DECIMALS,
) -> LedgerReplay:
    """
    Rebuild quantity and cost_price from zero by applying movements in order.

    Movements must already be sorted by creation (created_at, then id).
    """
    state = LedgerReplay()
    for movement in movements:
        if movement.type is MovementType.ENTRY:
            state.cost_price = weighted_average_cost(
                state.quantity,
                state.cost_price,
                movement.quantity,
                movement.unit_cost,
                cost_decimals,
            )
            state.entries += 1
        state.quantity = round_quantity(
            state.quantity + stock_effect(movement.type, movement.quantity),
            quantity_decimals,
        )
        if state.quantity < 0:
            state.went_negative = True
    return state
