"""Exception handlers: every failure leaves the API as {"ok": false, "error": ...}."""
import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from donor_registry.repositories.donor_repository import DuplicateContactError
from donor_registry.services.donor_intake import DonorValidationError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "N/A")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        f"Malformed request body: {exc.errors()}",
        extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"ok": False, "error": "Malformed request."},
    )


async def donor_validation_exception_handler(request: Request, exc: DonorValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "ok": False,
            "error": exc.message,
            "errors": [e.to_dict() for e in exc.errors],
        },
    )


async def duplicate_contact_exception_handler(request: Request, exc: DuplicateContactError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"ok": False, "error": str(exc)},
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False, "error": "Server error"},
    )
