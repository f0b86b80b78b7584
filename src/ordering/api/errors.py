"""Map domain and storage failures to HTTP responses.

Every error body has the shape ``{"error": ...}`` where the value is either a
message or a map of field name to messages.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.store.port import StoreFailure

logger = structlog.get_logger(__name__)


def _request_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # Drop the leading "body"/"path"/"query" segment
        field = ".".join(str(part) for part in error["loc"][1:]) or "_request"
        errors.setdefault(field, []).append(error["msg"])
    return errors


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": _request_errors(exc)})


def _error_detail(exc) -> object:
    # Only validation errors carry `messages`; the rest keep the detail in args[0]
    if hasattr(exc, "messages"):
        return exc.messages
    return exc.args[0] if exc.args else str(exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": _error_detail(exc)})


async def invalid_operation_handler(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": _error_detail(exc)})


async def store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    logger.error("store_failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then pin the status codes this service promises."""
    register_exception_handlers(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidOperationError, invalid_operation_handler)
    app.add_exception_handler(StoreFailure, store_failure_handler)
