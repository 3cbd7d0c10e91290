"""
Allocation API Routes
Preview basis-driven allocations (nothing is persisted)

- /flat     → one amount across independent weights
- /presets  → one amount across preset groups and standalone targets
- /dynamic  → same, with presets from the catalog (or request payloads) and values resolved per period
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ledgermap.api.dependencies import get_preset_catalog
from ledgermap.domain.errors import InvalidBasisError
from ledgermap.domain.models import (
    BasisAccount,
    NonPresetWeight,
    PresetAllocationResult,
    PresetBasisRow,
    PresetRow,
    SourceAccount,
)
from ledgermap.domain.schemas.allocation import (
    AccountIn,
    DynamicAllocationRequest,
    DynamicAllocationResponse,
    FlatAllocationRequest,
    FlatAllocationResponse,
    PresetAllocationOut,
    PresetAllocationRequest,
    PresetAllocationResponse,
    PresetRowAllocationOut,
    TargetAllocationOut,
)
from ledgermap.domain.services.allocation_engine import AllocationEngine
from ledgermap.domain.services.preset_catalog import PresetCatalog
from ledgermap.domain.services.rounding import to_decimal
from ledgermap.services.distribution_preset_service import build_preset_catalog
from ledgermap.services.dynamic_allocation_service import DynamicAllocationService

logger = logging.getLogger(__name__)

router = APIRouter()
engine = AllocationEngine()


# -------------------------------------------------------------------
# Helper utilities
# -------------------------------------------------------------------

def _to_account(payload: AccountIn, cls=BasisAccount) -> BasisAccount:
    return cls(
        id=payload.id,
        name=payload.name,
        value=to_decimal(payload.value) if payload.value is not None else None,
        values_by_period=dict(payload.values_by_period),
    )


def _serialize_result(result: PresetAllocationResult) -> dict:
    return {
        "allocations": [
            TargetAllocationOut(
                target_account_id=a.target_account_id,
                value=float(a.value),
                basis_value=float(a.basis_value),
                ratio=float(a.ratio),
                preset_id=a.preset_id,
            )
            for a in result.allocations
        ],
        "adjustment_index": result.adjustment_index,
        "adjustment_amount": float(result.adjustment_amount),
        "preset_allocations": [
            PresetAllocationOut(
                preset_id=p.preset_id,
                preset_name=p.preset_name,
                total_basis=float(p.total_basis),
                allocated_amount=float(p.allocated_amount),
                rows=[
                    PresetRowAllocationOut(
                        target_account_id=r.target_account_id,
                        basis_value=float(r.basis_value),
                        allocation=float(r.allocation),
                        ratio=float(r.ratio),
                    )
                    for r in p.rows
                ],
            )
            for p in result.preset_allocations
        ],
    }


def _invalid_basis(e: InvalidBasisError) -> HTTPException:
    logger.warning("Allocation rejected: %s", e)
    return HTTPException(status_code=422, detail=str(e))


def _bad_input(e: ValueError) -> HTTPException:
    logger.warning("Allocation input rejected: %s", e)
    return HTTPException(status_code=400, detail=str(e))


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------

@router.post("/flat", response_model=FlatAllocationResponse)
async def allocate_flat(request: FlatAllocationRequest):
    """
    Split an amount across independent basis weights
    """
    try:
        result = engine.allocate_flat(request.source_amount, request.basis_weights)
    except InvalidBasisError as e:
        raise _invalid_basis(e)
    except ValueError as e:
        raise _bad_input(e)

    return FlatAllocationResponse(
        allocations=[float(v) for v in result.allocations],
        adjustment_index=result.adjustment_index,
        adjustment_amount=float(result.adjustment_amount),
    )


@router.post("/presets", response_model=PresetAllocationResponse)
async def allocate_with_presets(request: PresetAllocationRequest):
    """
    Split an amount across presets (two-level) and standalone targets
    """
    preset_rows = [
        PresetBasisRow(
            dynamic_account_id=row.dynamic_account_id,
            target_account_id=row.target_account_id,
            basis_value=to_decimal(row.basis_value),
            preset_id=row.preset_id,
            preset_name=row.preset_name,
        )
        for row in request.preset_rows
    ]
    non_preset = [
        NonPresetWeight(basis_value=to_decimal(w.basis_value), target_id=w.target_id)
        for w in request.non_preset_weights
    ]

    try:
        result = engine.allocate_with_presets(request.source_amount, preset_rows, non_preset)
    except InvalidBasisError as e:
        raise _invalid_basis(e)
    except ValueError as e:
        raise _bad_input(e)

    return PresetAllocationResponse(**_serialize_result(result))


@router.post("/dynamic", response_model=DynamicAllocationResponse)
async def allocate_dynamic(
    request: DynamicAllocationRequest,
    catalog: PresetCatalog = Depends(get_preset_catalog),
):
    """
    Allocate a source account using catalog presets and period basis values

    Presets come from the request's distribution_presets when present,
    otherwise from the configured catalog.
    """
    if request.distribution_presets:
        catalog = build_preset_catalog(request.distribution_presets)
    service = DynamicAllocationService(catalog, engine)
    source = _to_account(request.source_account, SourceAccount)
    basis_accounts = [_to_account(account) for account in request.basis_accounts]
    targets = [
        PresetRow(dynamic_account_id=t.dynamic_account_id, target_account_id=t.target_account_id)
        for t in request.non_preset_targets
    ]

    try:
        source_amount, result = service.allocate(
            source,
            basis_accounts,
            request.preset_ids,
            targets,
            period_key=request.period_id,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]) if e.args else "Preset not found")
    except InvalidBasisError as e:
        raise _invalid_basis(e)
    except ValueError as e:
        raise _bad_input(e)

    return DynamicAllocationResponse(
        source_account_id=source.id,
        source_amount=float(source_amount),
        period_id=request.period_id,
        **_serialize_result(result),
    )
