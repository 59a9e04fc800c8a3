"""
Global exception handlers.

Every failure leaves the API as `{"error": "<human message>"}`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .errors import AppError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("app_error path=%s message=%s", request.url.path, exc.message)
        else:
            logger.info(
                "request_rejected path=%s status=%s error=%s",
                request.url.path,
                exc.status_code,
                type(exc).__name__,
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("validation_failed path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_validation_error_body(exc),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Never leak internals to the client.
        logger.exception("unhandled_error path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Unexpected error."},
        )


def _validation_error_body(exc: RequestValidationError) -> dict:
    return {
        "error": "Invalid request data.",
        "details": [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", ()) if loc != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ],
    }
