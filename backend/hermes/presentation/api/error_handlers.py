"""Exception handlers that render every API error as a ``{success, message}`` envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hermes.application.schemas import ErrorEnvelope
from hermes.domain.exceptions import ConflictError, TransientBackendError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, error: str | None = None, headers=None) -> JSONResponse:
    body = ErrorEnvelope(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI, *, expose_errors: bool = False) -> None:
    """Attach envelope-rendering handlers to ``app``.

    ``expose_errors`` includes the exception text of unexpected failures in the
    ``error`` field (development only).
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _envelope(status.HTTP_400_BAD_REQUEST, _describe_validation_errors(exc))

    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(request: Request, exc: ConflictError) -> JSONResponse:
        return _envelope(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(TransientBackendError)
    async def backend_exception_handler(request: Request, exc: TransientBackendError) -> JSONResponse:
        logger.warning("Backend unavailable on %s %s: %s", request.method, request.url.path, exc)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database temporarily unavailable, please try again",
            error=str(exc) if expose_errors else None,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            error=str(exc) if expose_errors else None,
        )
