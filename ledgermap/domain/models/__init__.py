"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    DistributionStatus,
    DistributionType,

    # Entities
    AllocationPreset,
    BasisAccount,
    DistributionRule,
    GroupMemberValue,
    NonPresetWeight,
    OperationShare,
    PresetBasisRow,
    PresetRow,
    SourceAccount,
)
from .allocation import (
    FlatAllocationResult,
    OperationAllocation,
    PresetAllocation,
    PresetAllocationResult,
    PresetRowAllocation,
    TargetAllocation,
)

__all__ = [
    # Enums
    "DistributionStatus",
    "DistributionType",

    # Entities
    "AllocationPreset",
    "BasisAccount",
    "DistributionRule",
    "GroupMemberValue",
    "NonPresetWeight",
    "OperationShare",
    "PresetBasisRow",
    "PresetRow",
    "SourceAccount",

    # Results
    "FlatAllocationResult",
    "OperationAllocation",
    "PresetAllocation",
    "PresetAllocationResult",
    "PresetRowAllocation",
    "TargetAllocation",
]
