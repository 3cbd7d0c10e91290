"""
Domain Models - Allocation results
Ephemeral outputs of the allocation engine; never persisted by it.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class FlatAllocationResult:
    """Output of a flat proportional split"""
    allocations: List[Decimal]
    adjustment_index: Optional[int]
    adjustment_amount: Decimal

    @property
    def total(self) -> Decimal:
        return sum(self.allocations, Decimal("0"))


@dataclass(frozen=True)
class TargetAllocation:
    """Amount allocated to one target account"""
    target_account_id: str
    value: Decimal
    basis_value: Decimal
    ratio: Decimal
    preset_id: Optional[str] = None


@dataclass(frozen=True)
class PresetRowAllocation:
    """One row of a preset breakdown"""
    target_account_id: str
    basis_value: Decimal
    allocation: Decimal
    ratio: Decimal


@dataclass(frozen=True)
class PresetAllocation:
    """Per-preset breakdown of a preset-aware allocation"""
    preset_id: str
    preset_name: str
    total_basis: Decimal
    allocated_amount: Decimal
    rows: List[PresetRowAllocation]


@dataclass(frozen=True)
class PresetAllocationResult:
    """Output of a two-level preset-aware split"""
    allocations: List[TargetAllocation]
    adjustment_index: Optional[int]
    adjustment_amount: Decimal
    preset_allocations: List[PresetAllocation]

    @property
    def total(self) -> Decimal:
        return sum((a.value for a in self.allocations), Decimal("0"))


@dataclass(frozen=True)
class OperationAllocation:
    """Amount distributed to one operation"""
    operation_cd: str
    amount: Decimal
    percentage: Optional[Decimal] = None
