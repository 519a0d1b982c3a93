"""Tests for the stock ledger arithmetic."""

import pytest

from src.core.entities import Movement, MovementType, UnitType
from src.core.exceptions import InvalidInputError
from src.core.services.stock_ledger import (
    consumption,
    edit_adjustment,
    entry_notes,
    exit_return_notes,
    format_quantity,
    replay_movements,
    require_non_negative,
    require_positive,
    reversal_effect,
    round_cost,
    round_quantity,
    stock_effect,
    weighted_average_cost,
)


class TestRounding:
    def test_half_up_not_bankers(self):
        assert round_cost(2.675) == 2.68
        assert round_cost(0.125) == 0.13

    def test_quantity_three_decimals(self):
        assert round_quantity(1.0005) == 1.001
        assert round_quantity(0.0004) == 0.0

    def test_negative_zero_folded(self):
        assert str(round_quantity(-0.0001)) == "0.0"


class TestValidation:
    @pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf"), None])
    def test_require_positive_rejects(self, value):
        with pytest.raises(InvalidInputError):
            require_positive("quantity", value)

    def test_require_positive_rejects_bool(self):
        with pytest.raises(InvalidInputError):
            require_positive("quantity", True)

    def test_require_positive_accepts(self):
        assert require_positive("quantity", 3) == 3.0

    def test_require_non_negative(self):
        assert require_non_negative("unit_cost", 0) == 0.0
        with pytest.raises(InvalidInputError):
            require_non_negative("unit_cost", -0.5)

    @pytest.mark.parametrize("value", [None, float("nan")])
    def test_require_non_negative_rejects_missing(self, value):
        with pytest.raises(InvalidInputError):
            require_non_negative("cost_price", value)


class TestEffects:
    def test_stock_effect_signs(self):
        assert stock_effect(MovementType.ENTRY, 4) == 4
        assert stock_effect(MovementType.EXIT, 4) == -4
        assert stock_effect(MovementType.LOSS, 4) == -4

    def test_reversal_is_opposite(self):
        assert reversal_effect(MovementType.ENTRY, 4) == -4
        assert reversal_effect(MovementType.LOSS, 4) == 4

    def test_edit_adjustment_entry(self):
        """Raising an entry adds the difference."""
        assert edit_adjustment(MovementType.ENTRY, 10, 15) == 5

    def test_edit_adjustment_exit(self):
        """Raising an exit takes the difference away."""
        assert edit_adjustment(MovementType.EXIT, 3, 5) == -2

    def test_edit_adjustment_unchanged(self):
        assert edit_adjustment(MovementType.LOSS, 2.5, 2.5) == 0


class TestWeightedAverageCost:
    def test_blends_by_quantity(self):
        assert weighted_average_cost(10, 5.0, 10, 7.0) == 6.0

    def test_from_empty_stock(self):
        assert weighted_average_cost(0, 0.0, 5, 3.333) == 3.33

    def test_zero_cost_entry_dilutes(self):
        assert weighted_average_cost(10, 10.0, 10, 0.0) == 5.0

    def test_rounding_half_up(self):
        # (1 * 1.00 + 2 * 1.01) / 3 = 1.00666...
        assert weighted_average_cost(1, 1.0, 2, 1.01) == 1.01


class TestConsumption:
    def test_out_minus_return(self):
        assert consumption(10, 3) == 7

    def test_fractional(self):
        assert consumption(1.5, 0.25) == 1.25


class TestNotes:
    def test_format_quantity_trims_zeros(self):
        assert format_quantity(7.0) == "7"
        assert format_quantity(2.50) == "2.5"
        assert format_quantity(0.125) == "0.125"

    def test_exit_return_notes(self):
        notes = exit_return_notes(10, 3, 7, UnitType.UNIT)
        assert notes == "Saiu: 10un | Retornou: 3un | Consumo: 7un"

    def test_exit_return_notes_weight_with_text(self):
        notes = exit_return_notes(1.5, 0.5, 1, UnitType.WEIGHT, "Polimento Civic")
        assert notes == "Saiu: 1.5kg | Retornou: 0.5kg | Consumo: 1kg | Polimento Civic"

    def test_entry_notes_with_vendor(self):
        assert entry_notes("Loja X", None) == "Fornecedor: Loja X"
        assert entry_notes("Loja X", "NF 123") == "Fornecedor: Loja X | NF 123"

    def test_entry_notes_without_vendor(self):
        assert entry_notes(None, "NF 123") == "NF 123"
        assert entry_notes(None, "") is None


class TestReplay:
    def _movement(self, movement_type, quantity, unit_cost=0.0):
        return Movement(product_id=1, type=movement_type, quantity=quantity, unit_cost=unit_cost)

    def test_empty_history(self):
        state = replay_movements([])
        assert state.quantity == 0
        assert state.cost_price == 0
        assert state.entries == 0

    def test_rebuilds_balance(self):
        history = [
            self._movement(MovementType.ENTRY, 10, 5.0),
            self._movement(MovementType.EXIT, 4, 5.0),
            self._movement(MovementType.ENTRY, 6, 8.0),
            self._movement(MovementType.LOSS, 2, 6.5),
        ]
        state = replay_movements(history)
        assert state.quantity == 10
        assert state.cost_price == 6.5
        assert state.entries == 2
        assert state.went_negative is False

    def test_flags_negative_history(self):
        state = replay_movements([self._movement(MovementType.EXIT, 1)])
        assert state.went_negative is True
