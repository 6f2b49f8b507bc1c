# seva_kendra/exceptions.py

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SevaKendraError(Exception):
    """Base for every error the components raise.

    ``status_code`` is the HTTP status the API boundary answers with.
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SevaKendraError):
    status_code = 400


class ConflictError(SevaKendraError):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(SevaKendraError):
    status_code = 401


class NotFoundError(SevaKendraError):
    status_code = 404


class StoreError(SevaKendraError):
    status_code = 500

    def __init__(self, message: str = "Database error"):
        super().__init__(message)


# ────────────────────────────── HANDLERS ──────────────────────────────

def error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def seva_kendra_error_handler(request: Request, exc: SevaKendraError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "Invalid request: " + "; ".join(parts) if parts else "Invalid request"
    return JSONResponse(status_code=400, content=error_body(message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Something went wrong"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SevaKendraError, seva_kendra_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
