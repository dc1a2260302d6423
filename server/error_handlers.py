"""Global exception handlers for the dashboard API.

DashboardError -> its HTTP status with the user-safe message only.
Anything else -> 500 with a generic message; details stay in the log.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dashboard.errors import DashboardError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        logger.error(
            f"{type(exc).__name__} on {request.url.path}: {exc}",
            extra={"error_code": exc.code},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_ERROR", "message": "Something went wrong."},
        )
