# app/core/exceptions.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from app.models.password_validation import ErrorResponse, ValidationError

logger = logging.getLogger(__name__)


class PromptLibraryError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailedError(PromptLibraryError):
    status_code = 400


class AuthenticationError(PromptLibraryError):
    status_code = 401


class PermissionDeniedError(PromptLibraryError):
    status_code = 403


class NotFoundError(PromptLibraryError):
    status_code = 404


class ConflictError(PromptLibraryError):
    status_code = 409


class StorageError(PromptLibraryError):
    """Raised by the stores when the backing database or file cannot be used."""
    status_code = 500


def _validation_errors(exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(ValidationError(loc=loc, msg=error.get("msg", ""), type=error.get("type", "value_error")))
    return errors


async def prompt_library_error_handler(request: Request, exc: PromptLibraryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = _validation_errors(exc)
    if errors:
        first = errors[0]
        field = ".".join(first.loc)
        message = f"{field}: {first.msg}" if field else first.msg
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content=ErrorResponse(error=message, details=errors).model_dump())


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"error": f"Rate limit exceeded: {exc.detail}"})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(PromptLibraryError, prompt_library_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
