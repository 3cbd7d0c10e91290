"""
SERVICE — DISTRIBUTION PRESET MAPPING

Turns distribution preset payloads (as stored per entity / SCOA account)
into allocation presets usable by the dynamic allocator.

NO database access.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ledgermap.domain.models import AllocationPreset, PresetRow
from ledgermap.domain.schemas.distribution_preset import (
    DistributionPresetDetailPayload,
    DistributionPresetPayload,
)
from ledgermap.domain.services.preset_catalog import PresetCatalog

logger = logging.getLogger(__name__)


def normalize_operation_code(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    trimmed = value.strip()
    return trimmed.upper() if trimmed else None


def build_preset_row(
    preset: DistributionPresetPayload,
    detail: DistributionPresetDetailPayload,
) -> Optional[PresetRow]:
    """Row for one detail, or None when the operation or account is blank"""
    operation_cd = normalize_operation_code(detail.operation_cd)
    account_id = (preset.scoa_account_id or "").strip()
    if not operation_cd or not account_id:
        return None
    return PresetRow(dynamic_account_id=account_id, target_account_id=operation_cd)


def map_distribution_presets(payloads: Iterable[DistributionPresetPayload]) -> List[AllocationPreset]:
    """
    Map distribution preset payloads to allocation presets.

    Payloads sharing a preset guid are merged (first payload supplies the
    name and notes). Payloads without usable rows are dropped.
    """
    grouped: Dict[str, dict] = {}

    for payload in payloads:
        rows = [
            row for row in (
                build_preset_row(payload, detail) for detail in (payload.preset_details or [])
            )
            if row is not None
        ]
        if not rows:
            logger.debug("Preset %s dropped: no usable rows", payload.preset_guid)
            continue

        existing = grouped.get(payload.preset_guid)
        if existing:
            existing["rows"].extend(rows)
            continue
        grouped[payload.preset_guid] = {"meta": payload, "rows": list(rows)}

    presets = []
    for guid, entry in grouped.items():
        meta: DistributionPresetPayload = entry["meta"]
        description = (meta.preset_description or "").strip()
        presets.append(AllocationPreset(
            id=guid,
            name=description or guid,
            rows=tuple(entry["rows"]),
            notes=meta.metric,
        ))
    return presets


def build_preset_catalog(payloads: Iterable[DistributionPresetPayload]) -> PresetCatalog:
    """Catalog over the presets mapped from distribution preset payloads"""
    presets = map_distribution_presets(payloads)
    logger.info("Mapped %d distribution presets", len(presets))
    return PresetCatalog.from_presets(presets)
