"""
ALLOCATION ENGINE
Split a source amount across targets in proportion to basis weights

RESPONSIBILITIES:
- Flat split across independent basis weights
- Two-level split across presets and standalone targets
- Cent-exact totals via largest-remainder correction

RULES:
❌ No I/O, no persistence
❌ No sign validation (negative amounts and weights pass through)
✅ Total basis must be positive
✅ Sum of allocations == source amount rounded to the cent
✅ Deterministic output
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Sequence

from ledgermap.domain.errors import InvalidBasisError
from ledgermap.domain.models import (
    FlatAllocationResult,
    NonPresetWeight,
    PresetAllocation,
    PresetAllocationResult,
    PresetBasisRow,
    PresetRowAllocation,
    TargetAllocation,
)
from ledgermap.domain.services.rounding import (
    Number,
    largest_magnitude_index,
    round_to_cents,
    to_decimal,
    to_finite_decimal,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class AllocationEngine:
    """
    Allocation Engine
    Stateless; one instance can serve any number of concurrent callers
    """

    def allocate_flat(
        self,
        source_amount: Number,
        basis_weights: Sequence[Number],
    ) -> FlatAllocationResult:
        """
        Split an amount across basis weights

        Args:
            source_amount: Amount to distribute
            basis_weights: One weight per target, in target order

        Returns:
            FlatAllocationResult with per-target cents, the index that
            absorbed the rounding residual (or None) and the residual

        Raises:
            InvalidBasisError: weights are non-empty but total <= 0
            ValueError: non-finite input, or an amount too large for cents
        """
        if not basis_weights:
            return FlatAllocationResult(allocations=[], adjustment_index=None, adjustment_amount=ZERO)

        source = to_finite_decimal(source_amount)
        weights = [to_finite_decimal(w) for w in basis_weights]
        total_basis = sum(weights, ZERO)
        if total_basis <= ZERO:
            raise InvalidBasisError()

        raw_allocations = [source * weight / total_basis for weight in weights]
        allocations = [round_to_cents(value) for value in raw_allocations]
        difference = round_to_cents(round_to_cents(source) - sum(allocations, ZERO))

        if difference == ZERO:
            return FlatAllocationResult(allocations=allocations, adjustment_index=None, adjustment_amount=ZERO)

        # Residual goes to the largest pre-rounding share
        index = largest_magnitude_index(raw_allocations)
        allocations[index] = round_to_cents(allocations[index] + difference)
        logger.debug("Flat allocation residual %s applied to index %d", difference, index)

        return FlatAllocationResult(
            allocations=allocations,
            adjustment_index=index,
            adjustment_amount=difference,
        )

    def allocate_with_presets(
        self,
        source_amount: Number,
        preset_rows: Sequence[PresetBasisRow],
        non_preset_weights: Sequence[NonPresetWeight],
    ) -> PresetAllocationResult:
        """
        Split an amount across presets and standalone targets

        The outer pass shares the amount between presets (by their total
        basis) and standalone targets; the inner pass splits each preset's
        share across its rows. Rounding is corrected per preset first, then
        once more across the combined result.

        Args:
            source_amount: Amount to distribute
            preset_rows: Resolved basis rows, tagged with their preset
            non_preset_weights: Standalone target weights

        Returns:
            PresetAllocationResult

        Raises:
            InvalidBasisError: aggregate basis <= 0
            ValueError: non-finite input, or an amount too large for cents
        """
        source = to_finite_decimal(source_amount)

        rows_by_preset: Dict[str, List[PresetBasisRow]] = {}
        for row in preset_rows:
            rows_by_preset.setdefault(row.preset_id, []).append(row)

        preset_totals = {
            preset_id: sum((to_finite_decimal(r.basis_value) for r in rows), ZERO)
            for preset_id, rows in rows_by_preset.items()
        }
        standalone = [(to_finite_decimal(w.basis_value), w.target_id) for w in non_preset_weights]

        total_basis = sum(preset_totals.values(), ZERO) + sum((b for b, _ in standalone), ZERO)
        if total_basis <= ZERO:
            raise InvalidBasisError()

        preset_allocations: List[PresetAllocation] = []
        allocations: List[TargetAllocation] = []

        for preset_id, rows in rows_by_preset.items():
            preset_total = preset_totals[preset_id]
            if preset_total <= ZERO:
                logger.debug("Preset %s skipped: total basis %s", preset_id, preset_total)
                continue

            preset_amount = source * preset_total / total_basis
            breakdown = self._split_preset(preset_amount, preset_total, rows)

            preset_allocations.append(PresetAllocation(
                preset_id=preset_id,
                preset_name=rows[0].preset_name,
                total_basis=preset_total,
                allocated_amount=sum((r.allocation for r in breakdown), ZERO),
                rows=breakdown,
            ))
            for row in breakdown:
                allocations.append(TargetAllocation(
                    target_account_id=row.target_account_id,
                    value=row.allocation,
                    basis_value=row.basis_value,
                    ratio=row.ratio,
                    preset_id=preset_id,
                ))

        for basis_value, target_id in standalone:
            ratio = basis_value / total_basis
            allocations.append(TargetAllocation(
                target_account_id=target_id,
                value=round_to_cents(source * ratio),
                basis_value=basis_value,
                ratio=ratio,
            ))

        allocated = sum((a.value for a in allocations), ZERO)
        difference = round_to_cents(round_to_cents(source) - allocated)
        adjustment_index = None

        if difference != ZERO:
            adjustment_index = largest_magnitude_index([a.value for a in allocations])
            if adjustment_index is not None:
                target = allocations[adjustment_index]
                allocations[adjustment_index] = replace(
                    target, value=round_to_cents(target.value + difference)
                )
                logger.debug(
                    "Global allocation residual %s applied to %s",
                    difference, target.target_account_id,
                )

        return PresetAllocationResult(
            allocations=allocations,
            adjustment_index=adjustment_index,
            adjustment_amount=difference,
            preset_allocations=preset_allocations,
        )

    @staticmethod
    def _split_preset(
        preset_amount: Decimal,
        preset_total: Decimal,
        rows: Sequence[PresetBasisRow],
    ) -> List[PresetRowAllocation]:
        """
        Split a preset's outer share across its rows

        Rounding residual against the rounded preset share goes to the row
        with the largest rounded allocation.
        """
        ratios = [to_decimal(row.basis_value) / preset_total for row in rows]
        values = [round_to_cents(preset_amount * ratio) for ratio in ratios]

        difference = round_to_cents(round_to_cents(preset_amount) - sum(values, ZERO))
        if difference != ZERO:
            index = largest_magnitude_index(values)
            values[index] = round_to_cents(values[index] + difference)

        return [
            PresetRowAllocation(
                target_account_id=row.target_account_id,
                basis_value=to_decimal(row.basis_value),
                allocation=value,
                ratio=ratio,
            )
            for row, value, ratio in zip(rows, values, ratios)
        ]


_default_engine = AllocationEngine()


def allocate_flat(source_amount: Number, basis_weights: Sequence[Number]) -> FlatAllocationResult:
    """Module-level shortcut for AllocationEngine.allocate_flat"""
    return _default_engine.allocate_flat(source_amount, basis_weights)


def allocate_with_presets(
    source_amount: Number,
    preset_rows: Sequence[PresetBasisRow],
    non_preset_weights: Sequence[NonPresetWeight],
) -> PresetAllocationResult:
    """Module-level shortcut for AllocationEngine.allocate_with_presets"""
    return _default_engine.allocate_with_presets(source_amount, preset_rows, non_preset_weights)
