from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from ledgermap.domain.schemas.distribution_preset import DistributionPresetPayload


class RequestModel(BaseModel):
    """Inbound payloads; NaN and Infinity are rejected"""
    model_config = ConfigDict(allow_inf_nan=False)


# Flat allocation

class FlatAllocationRequest(RequestModel):
    source_amount: float
    basis_weights: List[float] = Field(default_factory=list)


class FlatAllocationResponse(BaseModel):
    allocations: List[float]
    adjustment_index: Optional[int] = None
    adjustment_amount: float


# Preset-aware allocation

class PresetBasisRowIn(RequestModel):
    dynamic_account_id: str
    target_account_id: str
    basis_value: float
    preset_id: str
    preset_name: str


class NonPresetWeightIn(RequestModel):
    basis_value: float
    target_id: str


class PresetAllocationRequest(RequestModel):
    source_amount: float
    preset_rows: List[PresetBasisRowIn] = Field(default_factory=list)
    non_preset_weights: List[NonPresetWeightIn] = Field(default_factory=list)


class TargetAllocationOut(BaseModel):
    target_account_id: str
    value: float
    basis_value: float
    ratio: float
    preset_id: Optional[str] = None


class PresetRowAllocationOut(BaseModel):
    target_account_id: str
    basis_value: float
    allocation: float
    ratio: float


class PresetAllocationOut(BaseModel):
    preset_id: str
    preset_name: str
    total_basis: float
    allocated_amount: float
    rows: List[PresetRowAllocationOut]


class PresetAllocationResponse(BaseModel):
    allocations: List[TargetAllocationOut]
    adjustment_index: Optional[int] = None
    adjustment_amount: float
    preset_allocations: List[PresetAllocationOut]


# Dynamic allocation (catalog driven)

class AccountIn(RequestModel):
    id: str
    name: str
    value: Optional[float] = None
    values_by_period: Dict[str, Any] = Field(default_factory=dict)


class PresetRowIn(RequestModel):
    dynamic_account_id: str
    target_account_id: str


class DynamicAllocationRequest(RequestModel):
    source_account: AccountIn
    basis_accounts: List[AccountIn] = Field(default_factory=list)
    period_id: Optional[str] = Field(None, description="Reporting period key, e.g. 2024-01")
    preset_ids: List[str] = Field(default_factory=list)
    non_preset_targets: List[PresetRowIn] = Field(default_factory=list)
    distribution_presets: List[DistributionPresetPayload] = Field(
        default_factory=list,
        description="Entity distribution presets; when given, preset_ids refer to their guids",
    )


class DynamicAllocationResponse(PresetAllocationResponse):
    source_account_id: str
    source_amount: float
    period_id: Optional[str] = None


# Presets

class PresetInfo(BaseModel):
    id: str
    name: str
    notes: Optional[str] = None
    rows: List[PresetRowIn]


# Distribution preview

class OperationShareIn(RequestModel):
    operation_cd: str
    allocation: Optional[float] = Field(None, description="Percentage (0-100)")


class DistributionPreviewRequest(RequestModel):
    amount: float
    distribution_type: str
    scoa_account_id: str = ""
    operations: List[OperationShareIn] = Field(default_factory=list)
    status: Optional[str] = None

    # Dynamic rules only
    preset_id: Optional[str] = None
    basis_accounts: List[AccountIn] = Field(default_factory=list)
    period_id: Optional[str] = None
    distribution_presets: List[DistributionPresetPayload] = Field(default_factory=list)


class OperationAllocationOut(BaseModel):
    operation_cd: str
    amount: float
    percentage: Optional[float] = None


class DistributionPreviewResponse(BaseModel):
    scoa_account_id: str
    distribution_type: str
    status: str
    preset_id: Optional[str] = None
    amount: float
    operations: List[OperationAllocationOut]
