from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pms.domain.errors import AppError, NotFoundError, ValidationError

log = logging.getLogger(__name__)


def _error_body(message: str, details: list[dict] | None = None) -> dict:
    body: dict = {"error": message}
    if details:
        body["details"] = details
    return body


def _request_fields(request: Request, status_code: int) -> dict:
    return {"method": request.method, "path": request.url.path, "status_code": status_code}


def _field_path(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_path(err.get("loc", ())), "message": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=_error_body("Invalid data", details))


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=_error_body(exc.message or "Not found"))


async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    log.info(
        "request_rejected error=%s reason=%s", type(exc).__name__, exc.message,
        extra=_request_fields(request, 400),
    )
    return JSONResponse(status_code=400, content=_error_body(exc.message or "Invalid data", exc.details))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log.error("app_error error=%s", exc.message, extra=_request_fields(request, 500))
    return JSONResponse(status_code=500, content=_error_body(exc.message or "Internal server error"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", extra=_request_fields(request, 500))
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
