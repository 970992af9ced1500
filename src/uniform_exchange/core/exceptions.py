"""
Exception Handlers

Renders every error as the API envelope:

    {"success": false, "error": "<message>", "code": "...", "details": ...}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_DATA_MESSAGE = "Invalid data"


def error_body(error: str, code: str | None = None, **extra: Any) -> dict[str, Any]:
    """Build an error envelope."""
    body: dict[str, Any] = {"success": False, "error": error}
    if code:
        body["code"] = code
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def validation_details(exc: ValidationError | RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic errors reduced to JSON-safe location/message/type entries."""
    return [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException detail (str or dict) inside the envelope."""
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
        message = detail.pop("error", None) or detail.pop("message", None) or "Request failed"
        code = detail.pop("code", None)
        body = error_body(str(message), code, **detail)
    else:
        body = error_body(str(exc.detail))

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(body),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed body or query parameters answer 400."""
    logger.info(f"Validation failed for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            error_body(INVALID_DATA_MESSAGE, "VALIDATION_ERROR", details=validation_details(exc))
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected answers 500 without leaking internals."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
