"""HTTP error mapping: domain error codes, failed OperationResults and framework errors.

Every error body has the shape {"error": code, "message": text, "details": ...}.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from compliancehub.core.config import get_settings
from compliancehub.domain.exceptions import ComplianceHubException

if TYPE_CHECKING:
    from compliancehub.application.dtos.operation import OperationResult

logger = logging.getLogger(__name__)

# Unlisted codes map to 400
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "SUBJECT_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "DATA_INTEGRITY": 422,
    "INVALID_STATUS_TRANSITION": 409,
    "STORE_READ_FAILURE": 503,
    "STORE_WRITE_FAILURE": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for_error_code(error_code: str | None) -> int:
    """HTTP status for a domain error code (400 when unmapped)."""
    return _ERROR_CODE_STATUS.get(error_code or "", 400)


def operation_error_response(result: OperationResult[Any]) -> JSONResponse:
    """JSON error response for a failed OperationResult (same shape as to_dict())."""
    return JSONResponse(
        status_code=status_for_error_code(result.error_code),
        content={
            "error": result.error_code,
            "message": result.error,
            "details": result.details,
        },
    )


def _compliancehub_exception_handler(
    request: Request, exc: ComplianceHubException
) -> JSONResponse:
    """Domain exceptions raised past the use case layer (AssignmentService)."""
    return JSONResponse(
        status_code=status_for_error_code(exc.error_code),
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed query or body: 422 with pydantic error list."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
        return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail, "details": None},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500; the exception text is exposed only in debug."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail, "details": None},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above on app (once, from create_app)."""
    app.add_exception_handler(ComplianceHubException, _compliancehub_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
