"""
Distribution API Routes
Preview direct / percentage / dynamic distributions of an SCOA account
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ledgermap.api.dependencies import get_preset_catalog
from ledgermap.domain.errors import InvalidBasisError
from ledgermap.domain.models import (
    BasisAccount,
    DistributionRule,
    DistributionType,
    OperationAllocation,
    OperationShare,
)
from ledgermap.domain.schemas.allocation import (
    DistributionPreviewRequest,
    DistributionPreviewResponse,
    OperationAllocationOut,
)
from ledgermap.domain.services.basis_resolver import build_preset_basis_rows
from ledgermap.domain.services.distribution_engine import (
    DistributionEngine,
    normalize_distribution_status,
    normalize_distribution_type,
)
from ledgermap.domain.services.preset_catalog import PresetCatalog
from ledgermap.domain.services.rounding import round_to_cents, to_decimal
from ledgermap.services.distribution_preset_service import build_preset_catalog

router = APIRouter()
engine = DistributionEngine()


def _distribute_dynamic(
    request: DistributionPreviewRequest,
    rule: DistributionRule,
    catalog: PresetCatalog,
) -> List[OperationAllocation]:
    if request.distribution_presets:
        catalog = build_preset_catalog(request.distribution_presets)
    try:
        preset = catalog.get_preset(rule.preset_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Preset not found: {rule.preset_id}")

    basis_accounts = [
        BasisAccount(
            id=account.id,
            name=account.name,
            value=to_decimal(account.value) if account.value is not None else None,
            values_by_period=dict(account.values_by_period),
        )
        for account in request.basis_accounts
    ]
    rows = build_preset_basis_rows([preset], basis_accounts, request.period_id)
    return engine.distribute_dynamic(request.amount, rows)


@router.post("/preview", response_model=DistributionPreviewResponse)
async def preview_distribution(
    request: DistributionPreviewRequest,
    catalog: PresetCatalog = Depends(get_preset_catalog),
):
    """
    Compute per-operation amounts for a distribution rule

    Dynamic rules need a preset_id (from the catalog, or from the
    request's distribution_presets) and the basis accounts it reads.
    """
    distribution_type = normalize_distribution_type(request.distribution_type)
    if distribution_type is None:
        raise HTTPException(
            status_code=400,
            detail="distribution_type must be one of: direct, percentage, dynamic",
        )

    preset_id = (request.preset_id or "").strip() or None
    if distribution_type == DistributionType.DYNAMIC and preset_id is None:
        raise HTTPException(status_code=400, detail="Dynamic distributions require a preset_id")

    operations = []
    for op in request.operations:
        code = op.operation_cd.strip().upper()
        if not code:
            continue
        operations.append(OperationShare(
            operation_cd=code,
            allocation=to_decimal(op.allocation) if op.allocation is not None else None,
        ))

    rule = DistributionRule(
        scoa_account_id=request.scoa_account_id,
        distribution_type=distribution_type,
        operations=tuple(operations),
        preset_id=preset_id,
        status=normalize_distribution_status(request.status),
    )

    try:
        if distribution_type == DistributionType.DYNAMIC:
            allocations = _distribute_dynamic(request, rule, catalog)
        else:
            allocations = engine.distribute(request.amount, rule)
    except InvalidBasisError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DistributionPreviewResponse(
        scoa_account_id=rule.scoa_account_id,
        distribution_type=distribution_type.value,
        status=rule.status.value,
        preset_id=rule.preset_id,
        amount=float(round_to_cents(request.amount)),
        operations=[
            OperationAllocationOut(
                operation_cd=a.operation_cd,
                amount=float(a.amount),
                percentage=float(a.percentage) if a.percentage is not None else None,
            )
            for a in allocations
        ],
    )
