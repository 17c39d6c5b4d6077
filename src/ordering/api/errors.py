"""Map domain exceptions to JSON error responses.

Every error body has the same shape: ``{"success": false, "message": ...,
"errors": ...}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException

from ordering.exceptions import (
    ConflictError,
    InvalidSignatureError,
    InvalidTransitionError,
    ServiceUnavailableError,
)

logger = structlog.get_logger(__name__)


def _messages(exc: Exception):
    messages = getattr(exc, "messages", None)
    return messages if messages else str(exc)


def _first_message(errors, default: str) -> str:
    if isinstance(errors, dict):
        for values in errors.values():
            if isinstance(values, (list, tuple)) and values:
                return str(values[0])
            if values:
                return str(values)
    if isinstance(errors, str) and errors:
        return errors
    return default


def error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "errors": errors},
    )


async def _invalid_transition(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    errors = _messages(exc)
    return error_response(409, _first_message(errors, "Invalid status transition"), errors)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    errors = _messages(exc)
    return error_response(400, _first_message(errors, "Validation failed"), errors)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {".".join(str(part) for part in err["loc"][1:]) or "body": [err["msg"]] for err in exc.errors()}
    return error_response(400, "Invalid request", errors)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    errors = _messages(exc)
    return error_response(404, _first_message(errors, "Not found"), errors)


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return error_response(409, exc.message, exc.context or None)


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification rejected", path=request.url.path)
    return error_response(409, "The order was modified by another request. Please retry.")


async def _invalid_signature(request: Request, exc: InvalidSignatureError) -> JSONResponse:
    logger.warning(
        "Rejected payment with invalid signature",
        order_id=exc.order_id,
        gateway_order_id=exc.gateway_order_id,
        client=request.client.host if request.client else None,
    )
    return error_response(400, "Payment verification failed")


async def _service_unavailable(request: Request, exc: ServiceUnavailableError) -> JSONResponse:
    return error_response(503, exc.message)


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidTransitionError, _invalid_transition)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(InvalidSignatureError, _invalid_signature)
    app.add_exception_handler(ServiceUnavailableError, _service_unavailable)
    app.add_exception_handler(HTTPException, _http_error)
    app.add_exception_handler(Exception, _unexpected)
