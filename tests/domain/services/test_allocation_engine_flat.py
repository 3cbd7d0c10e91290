"""
Unit Tests for AllocationEngine.allocate_flat
"""

import random
from decimal import Decimal

import pytest

from ledgermap.domain.errors import InvalidBasisError
from ledgermap.domain.services.allocation_engine import AllocationEngine, allocate_flat
from ledgermap.domain.services.rounding import round_to_cents


@pytest.fixture
def engine():
    return AllocationEngine()


def D(values):
    return [Decimal(v) for v in values]


class TestScenarios:

    def test_exact_split(self, engine):
        result = engine.allocate_flat(Decimal("100.00"), [50, 30, 20])

        assert result.allocations == D(["50.00", "30.00", "20.00"])
        assert result.adjustment_index is None
        assert result.adjustment_amount == Decimal("0")

    def test_thirds_residual_goes_to_first(self, engine):
        result = engine.allocate_flat(Decimal("100.00"), [1, 1, 1])

        assert result.allocations == D(["33.34", "33.33", "33.33"])
        assert result.adjustment_index == 0
        assert result.adjustment_amount == Decimal("0.01")

    def test_negative_residual(self, engine):
        # 0.05 / 0.025 / 0.025 round up to 0.11
        result = engine.allocate_flat(Decimal("0.10"), [2, 1, 1])

        assert result.allocations == D(["0.04", "0.03", "0.03"])
        assert result.adjustment_index == 0
        assert result.adjustment_amount == Decimal("-0.01")

    def test_residual_follows_raw_magnitude(self, engine):
        # All three round to 0.33 but the last raw share is the largest
        result = engine.allocate_flat(Decimal("1.00"), [1, 1, Decimal("1.0001")])

        assert result.allocations == D(["0.33", "0.33", "0.34"])
        assert result.adjustment_index == 2


class TestEdgeCases:

    def test_empty_weights_is_not_an_error(self, engine):
        result = engine.allocate_flat(100, [])

        assert result.allocations == []
        assert result.adjustment_index is None
        assert result.adjustment_amount == Decimal("0")

    def test_all_zero_weights_raise(self, engine):
        with pytest.raises(InvalidBasisError, match="nonzero datapoints"):
            engine.allocate_flat(100, [0, 0])

    def test_negative_total_raises(self, engine):
        with pytest.raises(InvalidBasisError):
            engine.allocate_flat(100, [-1, -2])

    def test_invalid_basis_is_a_value_error(self, engine):
        with pytest.raises(ValueError):
            engine.allocate_flat(100, [0])

    @pytest.mark.parametrize("amount, weight", [
        (Decimal("123.456"), 7),
        (Decimal("99.995"), Decimal("0.3")),
        (250, 1),
        (-42.1, 3),
    ])
    def test_single_weight_gets_everything(self, engine, amount, weight):
        result = engine.allocate_flat(amount, [weight])

        assert result.allocations == [round_to_cents(amount)]
        assert result.adjustment_index is None

    def test_negative_source_amount(self, engine):
        result = engine.allocate_flat(-100, [1, 1, 1])

        assert result.allocations == D(["-33.34", "-33.33", "-33.33"])
        assert result.adjustment_index == 0
        assert result.adjustment_amount == Decimal("-0.01")

    def test_negative_weight_with_positive_total(self, engine):
        result = engine.allocate_flat(100, [3, -1])

        assert result.allocations == D(["150.00", "-50.00"])

    def test_float_inputs(self, engine):
        result = engine.allocate_flat(0.3, [0.1, 0.2])

        assert result.allocations == D(["0.10", "0.20"])
        assert result.adjustment_index is None


def test_deterministic():
    first = allocate_flat(Decimal("1000"), [3, 3, 3, 7])
    second = allocate_flat(Decimal("1000"), [3, 3, 3, 7])

    assert first == second


def test_sum_preservation_random_inputs():
    rng = random.Random(20240131)
    for _ in range(300):
        amount = Decimal(rng.randint(-10_000_000, 10_000_000)) / Decimal("1000")
        weights = [Decimal(rng.randint(0, 5000)) / Decimal("10") for _ in range(rng.randint(1, 12))]
        if sum(weights) <= 0:
            continue

        result = allocate_flat(amount, weights)

        assert sum(result.allocations, Decimal("0")) == round_to_cents(amount)
        assert all(v == round_to_cents(v) for v in result.allocations)


class TestNumericLimits:

    def test_tiny_negative_amount_has_no_negative_zero(self, engine):
        result = engine.allocate_flat(Decimal("-0.001"), [1])

        assert result.allocations == [Decimal("0.00")]
        assert not result.allocations[0].is_signed()

    def test_amount_too_large_for_cents(self, engine):
        with pytest.raises(ValueError, match="too large"):
            engine.allocate_flat(1e27, [1, 2])

    @pytest.mark.parametrize("weights", [[float("inf"), 1], [float("nan"), 1]])
    def test_non_finite_weight_rejected(self, engine, weights):
        with pytest.raises(ValueError, match="finite"):
            engine.allocate_flat(100, weights)

    def test_non_finite_amount_rejected(self, engine):
        with pytest.raises(ValueError, match="finite"):
            engine.allocate_flat(float("inf"), [1, 1])
