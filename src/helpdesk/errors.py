"""
Response Envelope and Error Handlers

Every response body, success or failure, is wrapped as
{"success": bool, "message": str, "data"?: ..., "errors"?: ...}.
"""
import logging
import traceback
from datetime import datetime
from typing import Any, Optional

import asyncpg
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config

logger = logging.getLogger("helpdesk.errors")

_UNSET = object()


class ApiResponse:
    """Builders for the JSON envelope"""

    @staticmethod
    def success(message: str, data: Any = _UNSET) -> dict:
        body = {"success": True, "message": message}
        if data is not _UNSET:
            body["data"] = data
        return body

    @staticmethod
    def error(message: str, errors: Any = None, data: Any = None) -> dict:
        body = {"success": False, "message": message}
        if data is not None:
            body["data"] = data
        if errors is not None:
            body["errors"] = errors
        return body


def original_url(request: Request) -> str:
    """Path plus query string, as requested"""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def not_found_response(request: Request) -> JSONResponse:
    """404 for a request no route matched"""
    url = original_url(request)
    body = ApiResponse.error(
        f"Route {url} not found",
        data={"path": url, "method": request.method},
    )
    return JSONResponse(status_code=404, content=body)


def _log_error(request: Request, status_code: int, message: str, exc: Optional[Exception] = None):
    details = {
        "message": message,
        "status": status_code,
        "url": str(request.url),
        "method": request.method,
        "timestamp": datetime.utcnow().isoformat(),
    }
    if status_code >= 500:
        logger.error(f"Error occurred: {details}", exc_info=exc)
    else:
        logger.info(f"Request rejected: {details}")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errors raised by guards and handlers, plus routing misses"""
    # Routing misses are raised by Starlette itself, never as fastapi.HTTPException
    if not isinstance(exc, HTTPException) and exc.status_code in (404, 405):
        _log_error(request, 404, "Route not found")
        return not_found_response(request)

    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    _log_error(request, exc.status_code, message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.error(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema failures on body, path or query"""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        errors.append({
            "field": ".".join(loc),
            "message": err.get("msg", "Invalid value"),
        })
    _log_error(request, 400, "Validation error")
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(ApiResponse.error("Validation error", errors=errors)),
    )


async def database_exception_handler(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
    """Constraint violations that slipped past service checks"""
    if isinstance(exc, asyncpg.UniqueViolationError):
        status_code, message = 409, "Resource already exists"
        errors = {"field": exc.constraint_name, "message": "Unique constraint violation"}
    elif isinstance(exc, asyncpg.ForeignKeyViolationError):
        status_code, message, errors = 400, "Invalid reference", None
    else:
        status_code, message, errors = 400, "Database operation failed", None

    _log_error(request, status_code, f"{message}: {exc}", exc)
    return JSONResponse(status_code=status_code, content=ApiResponse.error(message, errors=errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is a 500"""
    _log_error(request, 500, str(exc), exc)
    body = ApiResponse.error("Internal server error")
    if Config.is_development():
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on an app"""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(asyncpg.PostgresError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
