"""
Preset API Routes
Expose the allocation preset catalog
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ledgermap.api.dependencies import get_preset_catalog
from ledgermap.domain.models import AllocationPreset
from ledgermap.domain.schemas.allocation import PresetInfo, PresetRowIn
from ledgermap.domain.services.preset_catalog import PresetCatalog

router = APIRouter()


def _to_info(preset: AllocationPreset) -> PresetInfo:
    return PresetInfo(
        id=preset.id,
        name=preset.name,
        notes=preset.notes,
        rows=[
            PresetRowIn(
                dynamic_account_id=row.dynamic_account_id,
                target_account_id=row.target_account_id,
            )
            for row in preset.rows
        ],
    )


@router.get("", response_model=List[PresetInfo])
async def list_presets(catalog: PresetCatalog = Depends(get_preset_catalog)):
    """
    List all allocation presets
    """
    return [_to_info(preset) for preset in catalog.presets]


@router.get("/{preset_id}", response_model=PresetInfo)
async def get_preset(preset_id: str, catalog: PresetCatalog = Depends(get_preset_catalog)):
    """
    Get a single preset
    """
    try:
        return _to_info(catalog.get_preset(preset_id))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Preset not found: {preset_id}")
