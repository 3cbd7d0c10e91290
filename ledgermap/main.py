"""
FastAPI Main Application
Ledger mapping allocation service
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI

from ledgermap.config import settings
from ledgermap.core.logging import get_logger, setup_logging
from ledgermap.domain.services.preset_catalog import PresetCatalog

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def resolve_preset_file(path: str) -> Path:
    """Relative paths are taken from the project root"""
    candidate = Path(path)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Loads the preset catalog on startup
    """
    logger.info("Starting ledger mapping service (%s)", settings.APP_ENV)

    catalog = PresetCatalog(resolve_preset_file(settings.PRESET_CONFIG_FILE))
    catalog.load()
    app.state.preset_catalog = catalog
    logger.info("Preset catalog ready: %d presets", len(catalog))

    yield

    logger.info("Shutting down ledger mapping service")


app = FastAPI(
    title="Ledger Mapping Service",
    description="GL to SCOA mapping and basis-driven allocation",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Health check"""
    catalog = getattr(app.state, "preset_catalog", None)
    return {
        "status": "healthy",
        "service": "Ledger Mapping Service",
        "version": "1.0.0",
        "presets_loaded": len(catalog) if catalog is not None else 0,
    }


# Import and include routers
from ledgermap.api.routes import allocations, distributions, presets  # noqa: E402

app.include_router(allocations.router, prefix="/api/v1/allocations", tags=["Allocations"])
app.include_router(distributions.router, prefix="/api/v1/distributions", tags=["Distributions"])
app.include_router(presets.router, prefix="/api/v1/presets", tags=["Presets"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("ledgermap.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
