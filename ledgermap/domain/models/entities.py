"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


class DistributionType(str, Enum):
    """How an SCOA account's activity is spread across operations"""
    DIRECT = "direct"
    PERCENTAGE = "percentage"
    DYNAMIC = "dynamic"


class DistributionStatus(str, Enum):
    """Whether a distribution has been completed"""
    DISTRIBUTED = "Distributed"
    UNDISTRIBUTED = "Undistributed"


@dataclass(frozen=True)
class BasisAccount:
    """Basis datapoint account - read-only to the engine"""
    id: str
    name: str
    value: Optional[Decimal] = None
    values_by_period: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SourceAccount(BasisAccount):
    """Account holding the amount being distributed (same shape as BasisAccount)"""


@dataclass(frozen=True)
class PresetRow:
    """Maps a basis account to the target account it feeds"""
    dynamic_account_id: str
    target_account_id: str


@dataclass(frozen=True)
class AllocationPreset:
    """Named, pre-configured group of basis-to-target mappings"""
    id: str
    name: str
    rows: Tuple[PresetRow, ...] = ()
    notes: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Preset id cannot be empty")


@dataclass(frozen=True)
class PresetBasisRow:
    """Resolved basis weight for one preset row at computation time"""
    dynamic_account_id: str
    target_account_id: str
    basis_value: Decimal
    preset_id: str
    preset_name: str


@dataclass(frozen=True)
class NonPresetWeight:
    """Standalone basis weight for a target outside any preset"""
    basis_value: Decimal
    target_id: str


@dataclass(frozen=True)
class GroupMemberValue:
    """Preset member with its resolved basis value"""
    account_id: str
    account_name: str
    value: Decimal


@dataclass(frozen=True)
class OperationShare:
    """Operation receiving part of a direct or percentage distribution"""
    operation_cd: str
    allocation: Optional[Decimal] = None


@dataclass(frozen=True)
class DistributionRule:
    """Distribution of one SCOA account across operations"""
    scoa_account_id: str
    distribution_type: DistributionType
    operations: Tuple[OperationShare, ...] = ()
    preset_id: Optional[str] = None
    status: DistributionStatus = DistributionStatus.UNDISTRIBUTED
