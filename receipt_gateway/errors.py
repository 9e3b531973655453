"""
Error types and the single place where failures become HTTP responses.

Every route answers with ``{"ok": false, "error": ...}`` on failure. Relay
outcomes are mapped by :func:`outcome_response`; raised exceptions by the
handlers installed in :func:`register_error_handlers`.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from .models.outcomes import RelayOutcome, Success, TransportFailure, UpstreamError

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    status_code = 400

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(reason)
        self.reason = reason
        if status_code is not None:
            self.status_code = status_code


class FileTooLarge(ValidationError):
    status_code = 413


class ConfigurationError(RuntimeError):
    """OCR provider settings are incomplete."""


class StoreUnavailable(RuntimeError):
    """The receipt document store is not configured."""


def error_response(status_code: int, error: Any, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error}, headers=headers)


def _upstream_status(status_code: int | None) -> int:
    """Status the client sees for a non-2xx upstream answer.

    Error statuses (4xx/5xx) pass through unchanged. The Express service this
    replaces forwarded ``resp.status`` whatever it was; a 1xx or 3xx is
    reported here as a bad gateway instead, since it is not an error code a
    client can act on.
    """
    if status_code and 400 <= status_code < 600:
        return status_code
    return 502


def outcome_response(outcome: RelayOutcome) -> JSONResponse:
    if isinstance(outcome, Success):
        return JSONResponse(status_code=200, content={"ok": True, "data": {"text": outcome.text, "raw": outcome.raw}})
    if isinstance(outcome, UpstreamError):
        body = outcome.body
        if body in (None, ""):
            body = f"Upstream error: {outcome.status_code}"
        return error_response(_upstream_status(outcome.status_code), body)
    if isinstance(outcome, TransportFailure):
        cause = outcome.cause
        return error_response(500, str(cause) or type(cause).__name__)
    raise TypeError(f"unknown relay outcome: {outcome!r}")


def validation_response(exc: ValidationError) -> JSONResponse:
    return error_response(exc.status_code, exc.reason)


def unhandled_response(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, str(exc) or "Internal Server Error")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _on_validation_error(request: Request, exc: ValidationError):
        logger.info("rejected %s status=%s reason=%s", request.url.path, exc.status_code, exc.reason)
        return validation_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _on_bad_request(_request: Request, exc: RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return error_response(400, "; ".join(parts) or "Malformed request")

    @app.exception_handler(StarletteHTTPException)
    async def _on_http_error(_request: Request, exc: StarletteHTTPException):
        # multipart parse failures, unknown routes, wrong methods
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(StoreUnavailable)
    async def _on_store_unavailable(_request: Request, exc: StoreUnavailable):
        return error_response(503, str(exc))

    @app.exception_handler(Exception)
    async def _on_unhandled(request: Request, exc: Exception):
        return unhandled_response(request, exc)
