"""
SERVICE — DYNAMIC ALLOCATION SERVICE

Resolves source/basis accounts for a reporting period, groups basis rows
by preset and runs the preset-aware allocator.

NO database writes.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from ledgermap.domain.models import (
    BasisAccount,
    NonPresetWeight,
    PresetAllocationResult,
    PresetRow,
    SourceAccount,
)
from ledgermap.domain.services.allocation_engine import AllocationEngine
from ledgermap.domain.services.basis_resolver import (
    build_preset_basis_rows,
    resolve_basis_value,
    resolve_source_value,
)
from ledgermap.domain.services.preset_catalog import PresetCatalog

logger = logging.getLogger(__name__)


class DynamicAllocationService:
    """Glue between the account/preset catalogs and the allocation engine"""

    def __init__(self, preset_catalog: PresetCatalog, engine: Optional[AllocationEngine] = None):
        self.preset_catalog = preset_catalog
        self.engine = engine or AllocationEngine()

    def allocate(
        self,
        source_account: SourceAccount,
        basis_accounts: Sequence[BasisAccount],
        preset_ids: Sequence[str],
        non_preset_targets: Sequence[PresetRow] = (),
        period_key: Optional[str] = None,
    ) -> Tuple[Decimal, PresetAllocationResult]:
        """
        Allocate a source account across presets and standalone targets.

        Args:
            source_account: Account whose amount is distributed
            basis_accounts: Basis datapoint accounts
            preset_ids: Catalog presets taking part in the allocation
            non_preset_targets: Basis-to-target pairs outside any preset
            period_key: Reporting period; default values used when absent

        Returns:
            Tuple of (resolved source amount, allocation result)

        Raises:
            KeyError: unknown preset id
            InvalidBasisError: aggregate basis is zero or negative
        """
        source_amount = resolve_source_value(source_account, period_key)
        presets = [self.preset_catalog.get_preset(preset_id) for preset_id in preset_ids]
        preset_rows = build_preset_basis_rows(presets, basis_accounts, period_key)

        accounts_by_id = {account.id: account for account in basis_accounts}
        non_preset_weights = []
        for target in non_preset_targets:
            account = accounts_by_id.get(target.dynamic_account_id)
            basis_value = resolve_basis_value(account, period_key) if account else Decimal("0")
            non_preset_weights.append(
                NonPresetWeight(basis_value=basis_value, target_id=target.target_account_id)
            )

        result = self.engine.allocate_with_presets(source_amount, preset_rows, non_preset_weights)

        skipped = {p.id for p in presets} - {p.preset_id for p in result.preset_allocations}
        if skipped:
            logger.info("Presets without basis for period %s: %s", period_key, sorted(skipped))
        logger.info(
            "Allocated %s from %s across %d targets (adjustment %s)",
            source_amount, source_account.id, len(result.allocations), result.adjustment_amount,
        )
        return source_amount, result
