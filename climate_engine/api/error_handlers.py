"""Global exception handlers for FastAPI."""

import logging
import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from climate_engine.api.security import Unauthorized
from climate_engine.collectors.base import NoSeriesError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(NoSeriesError)
    async def no_series_handler(request: Request, exc: NoSeriesError):
        logger.warning("No series on %s: %s", request.url.path, exc.variable)
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized):
        logger.info("Rejected unauthenticated request on %s", request.url.path)
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.warning("ValueError on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s\n%s",
                     request.url.path, exc, traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )
