import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from climate_engine.api.deps import get_provider
from climate_engine.api.error_handlers import register_error_handlers
from climate_engine.api.routes_climate import router as climate_router
from climate_engine.api.routes_meta import router as meta_router
from climate_engine.config import settings
from climate_engine.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Climate Engine on port %d (source=%s, cache=%s)",
                settings.engine_port, settings.data_source, settings.cache_backend)
    get_provider()  # Fail fast on a misconfigured source/cache

    yield

    logger.info("Climate Engine stopped")


app = FastAPI(
    title="Climate Engine",
    description="Day-of-year climate statistics, exceedance probabilities and trend projections",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

app.include_router(meta_router)
app.include_router(climate_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.engine_host, port=settings.engine_port)
