"""
Error taxonomy and HTTP mapping.

Every failure the API reports belongs to one of four classes:

- ValidationError: malformed or missing input (400)
- NotFoundError: no entity at the requested id (404)
- ConflictError: email uniqueness violation (409)
- InternalError: storage failure or unexpected exception (500)

Internal error text is logged, never returned to the client.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Internal server error"
_REQUEST_LOCATIONS = ("body", "query", "path")


class ContactBookError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(ContactBookError):
    """Input failed validation before reaching storage."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[Dict[str, List[str]]] = None,
        form: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.fields = fields or {}
        self.form = form or []

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "fields": self.fields, "form": self.form}


class NotFoundError(ContactBookError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ContactBookError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(ContactBookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_payload(self) -> Dict[str, Any]:
        return {"error": GENERIC_INTERNAL_MESSAGE}


def flatten_validation_errors(errors: List[Dict[str, Any]]) -> ValidationError:
    """
    Collapse pydantic error entries into field-level messages.

    The leading body, query or path segment is stripped so the client sees
    plain field names; errors without a field land in the form-level list.
    """
    fields: Dict[str, List[str]] = {}
    form: List[str] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        message = err.get("msg", "Invalid value")
        if loc:
            fields.setdefault(".".join(loc), []).append(message)
        else:
            form.append(message)
    return ValidationError(fields=fields, form=form)


async def contactbook_error_handler(request: Request, exc: ContactBookError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = flatten_validation_errors(list(exc.errors()))
    logger.info("Request validation failed on %s %s: %s", request.method, request.url.path, error.fields)
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_INTERNAL_MESSAGE},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_INTERNAL_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the JSON error mapping on the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ContactBookError, contactbook_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
    logger.info("Exception handlers registered")
