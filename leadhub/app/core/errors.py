"""Error taxonomy for the CRM API and the handlers that turn it into JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


class CRMError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> dict:
        return {"error": self.message}


class ValidationError(CRMError):
    """Malformed, missing or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Validation failed", errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def body(self) -> dict:
        return {"error": self.message, "errors": self.errors}


class AuthError(CRMError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(CRMError):
    """Authenticated, but not permitted to touch the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(CRMError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CRMError):
    """Duplicate email, or a business that still has clients."""

    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(CRMError):
    """Driver-level failure surfaced by the persistence gateway."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def format_validation_errors(raw_errors) -> list[dict]:
    """Flatten pydantic error entries into ``{"field", "message"}`` pairs."""
    formatted = []
    for err in raw_errors:
        # Drop the "body"/"query"/"path" location prefix
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({"field": ".".join(location) or None, "message": err.get("msg", "Invalid value")})
    return formatted


async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(
            "Storage failure: %s", exc.message, extra={"method": request.method, "path": request.url.path}
        )
        return JSONResponse(status_code=exc.status_code, content={"error": GENERIC_SERVER_ERROR})
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(errors=format_validation_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"method": request.method, "path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_SERVER_ERROR},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CRMError, crm_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
