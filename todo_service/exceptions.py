import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TodoNotFoundException(HTTPException):
    def __init__(self, detail: str = "Todo not found"):
        super().__init__(status_code=404, detail=detail)


class UserNotFoundException(HTTPException):
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=404, detail=detail)


class InvalidCredentialsException(HTTPException):
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(status_code=401, detail=detail)


class EmailTakenException(HTTPException):
    def __init__(self, detail: str = "Email already taken"):
        super().__init__(status_code=400, detail=detail)


class UsernameTakenException(HTTPException):
    def __init__(self, detail: str = "Username already taken"):
        super().__init__(status_code=400, detail=detail)


class ServerException(HTTPException):
    """Any store, hashing or signing failure; the raw error text is passed through."""

    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = err.get("loc", ())
        field = ".".join(str(p) for p in loc[1:]) or ".".join(str(p) for p in loc)
        parts.append(f"{field}: {err.get('msg')}")
    return "Validation failed: " + "; ".join(parts)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": _format_validation_errors(exc)})


async def server_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": str(exc)})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, server_error_handler)
