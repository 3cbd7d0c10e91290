from fastapi import HTTPException, Request

from ledgermap.domain.services.preset_catalog import PresetCatalog


def get_preset_catalog(request: Request) -> PresetCatalog:
    catalog = getattr(request.app.state, "preset_catalog", None)
    if catalog is None:
        raise HTTPException(status_code=500, detail="Preset catalog not loaded")
    return catalog
