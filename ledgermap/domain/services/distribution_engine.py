"""
DISTRIBUTION ENGINE
Spread an SCOA account's activity across operations

RESPONSIBILITIES:
- Normalize distribution type / status values coming from clients
- Direct: whole amount to a single operation
- Percentage: specified shares that total 100%
- Dynamic: basis-driven shares through the allocation engine

RULES:
✅ Percentages are clamped to 0-100
✅ Cent-exact totals (reuses the allocation engine)
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from ledgermap.domain.models import (
    DistributionRule,
    DistributionStatus,
    DistributionType,
    OperationAllocation,
    PresetBasisRow,
)
from ledgermap.domain.services.allocation_engine import AllocationEngine
from ledgermap.domain.services.rounding import Number, is_numeric, round_to_cents, to_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
PERCENT_TOLERANCE = Decimal("0.01")


def _normalize_text(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def normalize_distribution_type(value: object) -> Optional[DistributionType]:
    """Case-insensitive lookup; unknown or blank values give None"""
    normalized = _normalize_text(value)
    if not normalized:
        return None
    try:
        return DistributionType(normalized.lower())
    except ValueError:
        return None


def normalize_distribution_status(value: object) -> DistributionStatus:
    """Anything other than 'distributed' (any case) is Undistributed"""
    normalized = _normalize_text(value)
    if normalized and normalized.lower() == "distributed":
        return DistributionStatus.DISTRIBUTED
    return DistributionStatus.UNDISTRIBUTED


def clamp_percentage(value: object) -> Optional[Decimal]:
    """Clamp a percentage to [0, 100]; non-numeric gives None"""
    if not is_numeric(value):
        return None
    return max(Decimal("0"), min(HUNDRED, to_decimal(value)))


class DistributionEngine:
    """
    Distribution Engine
    Applies a DistributionRule to an amount
    """

    def __init__(self, allocation_engine: Optional[AllocationEngine] = None):
        self.allocation_engine = allocation_engine or AllocationEngine()

    def distribute(self, amount: Number, rule: DistributionRule) -> List[OperationAllocation]:
        """
        Distribute an amount per a direct or percentage rule

        Args:
            amount: Activity amount of the SCOA account
            rule: Distribution rule

        Returns:
            One OperationAllocation per operation, in rule order
        """
        if rule.distribution_type == DistributionType.DIRECT:
            return self._distribute_direct(amount, rule)
        if rule.distribution_type == DistributionType.PERCENTAGE:
            return self._distribute_percentage(amount, rule)
        raise ValueError(
            f"Dynamic distribution for {rule.scoa_account_id} needs basis values; "
            "use distribute_dynamic"
        )

    def distribute_dynamic(
        self,
        amount: Number,
        preset_rows: Sequence[PresetBasisRow],
    ) -> List[OperationAllocation]:
        """
        Distribute an amount across the operations fed by preset rows

        Rows targeting the same operation are summed.
        """
        result = self.allocation_engine.allocate_with_presets(amount, preset_rows, [])
        by_operation: Dict[str, Decimal] = {}
        for allocation in result.allocations:
            code = allocation.target_account_id
            by_operation[code] = by_operation.get(code, Decimal("0")) + allocation.value
        return [
            OperationAllocation(operation_cd=code, amount=value)
            for code, value in by_operation.items()
        ]

    @staticmethod
    def _distribute_direct(amount: Number, rule: DistributionRule) -> List[OperationAllocation]:
        if len(rule.operations) != 1:
            raise ValueError(
                f"Direct distribution for {rule.scoa_account_id} requires exactly one operation, "
                f"got {len(rule.operations)}"
            )
        operation = rule.operations[0]
        return [OperationAllocation(
            operation_cd=operation.operation_cd,
            amount=round_to_cents(amount),
            percentage=HUNDRED,
        )]

    def _distribute_percentage(self, amount: Number, rule: DistributionRule) -> List[OperationAllocation]:
        if not rule.operations:
            raise ValueError(f"Percentage distribution for {rule.scoa_account_id} has no operations")

        percentages = [clamp_percentage(op.allocation) or Decimal("0") for op in rule.operations]
        total_pct = sum(percentages, Decimal("0"))
        if abs(total_pct - HUNDRED) > PERCENT_TOLERANCE:
            raise ValueError(
                f"Percentage distribution for {rule.scoa_account_id} totals {total_pct}%, expected 100%"
            )

        result = self.allocation_engine.allocate_flat(amount, percentages)
        if result.adjustment_index is not None:
            logger.debug(
                "Percentage distribution %s: %s residual on %s",
                rule.scoa_account_id,
                result.adjustment_amount,
                rule.operations[result.adjustment_index].operation_cd,
            )

        return [
            OperationAllocation(operation_cd=op.operation_cd, amount=value, percentage=pct)
            for op, value, pct in zip(rule.operations, result.allocations, percentages)
        ]
