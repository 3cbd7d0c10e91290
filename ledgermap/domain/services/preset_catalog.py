"""
PRESET CATALOG
Load, validate, and expose allocation presets

RESPONSIBILITIES:
- Load presets from YAML configuration
- Validate preset integrity
- Expose read-only preset objects

RULES:
❌ No defaults if config missing
✅ Fail fast on invalid config
✅ Preserve configured order
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from ledgermap.domain.models import AllocationPreset, PresetRow

logger = logging.getLogger(__name__)


class PresetCatalog:
    """
    Preset Catalog
    Single source of truth for allocation presets
    """

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize with the presets YAML file"""
        self.config_file = Path(config_file) if config_file else None
        self._presets: Dict[str, AllocationPreset] = {}
        self._loaded = False

    @classmethod
    def from_presets(cls, presets: Iterable[AllocationPreset]) -> "PresetCatalog":
        """Build a catalog from already-mapped presets"""
        catalog = cls()
        catalog._store(list(presets))
        return catalog

    def load(self) -> None:
        """Load presets from the YAML file"""
        if self.config_file is None:
            raise ValueError("No preset config file configured")
        if not self.config_file.exists():
            raise FileNotFoundError(f"Preset config not found: {self.config_file}")

        with open(self.config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        presets = [self._parse_preset(entry) for entry in data.get("presets", []) or []]
        self._store(presets)
        logger.info("Loaded %d allocation presets from %s", len(presets), self.config_file)

    @staticmethod
    def _parse_preset(entry: dict) -> AllocationPreset:
        if "id" not in entry:
            raise ValueError(f"Preset entry without id: {entry}")

        preset_id = str(entry["id"]).strip()
        rows = []
        for row in entry.get("rows", []) or []:
            try:
                rows.append(PresetRow(
                    dynamic_account_id=str(row["dynamic_account_id"]).strip(),
                    target_account_id=str(row["target_account_id"]).strip(),
                ))
            except KeyError as e:
                raise ValueError(f"Preset {preset_id} row missing {e.args[0]}") from e

        return AllocationPreset(
            id=preset_id,
            name=str(entry.get("name") or preset_id).strip(),
            rows=tuple(rows),
            notes=entry.get("notes"),
        )

    def _store(self, presets: List[AllocationPreset]) -> None:
        ids = [preset.id for preset in presets]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate preset ids found in configuration")
        self._presets = {preset.id: preset for preset in presets}
        self._loaded = True

    @property
    def presets(self) -> List[AllocationPreset]:
        """All presets in configured order"""
        if not self._loaded:
            raise RuntimeError("Preset catalog not loaded. Call load() first.")
        return list(self._presets.values())

    def get_preset(self, preset_id: str) -> AllocationPreset:
        """Get a preset by id; raises KeyError when unknown"""
        if not self._loaded:
            raise RuntimeError("Preset catalog not loaded. Call load() first.")
        try:
            return self._presets[preset_id]
        except KeyError:
            raise KeyError(f"Preset not found: {preset_id}") from None

    def __contains__(self, preset_id: object) -> bool:
        return preset_id in self._presets

    def __len__(self) -> int:
        return len(self._presets)
