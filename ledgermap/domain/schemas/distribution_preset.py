from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class DistributionPresetDetailPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    operation_cd: Optional[str] = Field(None, alias="operationCd")
    is_calculated: Optional[bool] = Field(None, alias="isCalculated")
    specified_pct: Optional[float] = Field(None, alias="specifiedPct")


class DistributionPresetPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    preset_guid: str = Field(..., alias="presetGuid")
    entity_id: str = Field(..., alias="entityId")
    preset_type: Optional[str] = Field(None, alias="presetType")
    preset_description: Optional[str] = Field(None, alias="presetDescription")
    scoa_account_id: Optional[str] = Field(None, alias="scoaAccountId")
    metric: Optional[str] = None
    preset_details: Optional[List[DistributionPresetDetailPayload]] = Field(
        default_factory=list, alias="presetDetails"
    )
