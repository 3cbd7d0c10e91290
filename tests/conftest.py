from pathlib import Path
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from ledgermap.api.routes import allocations, distributions, presets
from ledgermap.domain.services.preset_catalog import PresetCatalog

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


@pytest.fixture()
def preset_catalog() -> PresetCatalog:
    catalog = PresetCatalog(CONFIG_DIR / "presets.yml")
    catalog.load()
    return catalog


@pytest.fixture()
def app(preset_catalog) -> FastAPI:
    app = FastAPI()
    app.include_router(allocations.router, prefix="/api/v1/allocations", tags=["Allocations"])
    app.include_router(distributions.router, prefix="/api/v1/distributions", tags=["Distributions"])
    app.include_router(presets.router, prefix="/api/v1/presets", tags=["Presets"])
    app.state.preset_catalog = preset_catalog
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
