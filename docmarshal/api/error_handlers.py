"""Error Handlers — global exception handlers for FastAPI hosts of the engine.

Invariants:
    - MarshalError → structured JSON with error code, message, severity
    - InvalidOptionsError responses also carry field-level details
    - Validation failures never reach these handlers (they live in error bags)

Design Decisions:
    - Registration function instead of an app: the engine has no routes of its own,
      hosts opt in with register_error_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from docmarshal.core.errors import InvalidOptionsError, MarshalError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the MarshalError handler on the FastAPI app."""

    @app.exception_handler(MarshalError)
    async def marshal_error_handler(request: Request, exc: MarshalError):
        """Handle all docmarshal contract and configuration errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"MarshalError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=build_error_response(exc),
        )


def build_error_response(exc: MarshalError) -> dict:
    """REST envelope for `exc`, with option details when present."""
    body = exc.to_response()
    if isinstance(exc, InvalidOptionsError):
        body["error"]["details"] = exc.details
    return body
