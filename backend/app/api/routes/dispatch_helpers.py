"""Dispatch Helpers: the single boundary converting internal errors to HTTP 500.

Invariants:
    - The client only ever sees the plain text "Internal Server Error"
    - The detail (message, traceback, error code) is logged server-side
    - Bodies are parsed inside the handler, so a malformed or incomplete body
      fails through the same 500 path on any host router
"""

import logging
from typing import TypeVar

from fastapi import Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from app.core.errors import BridgeError

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_TEXT = "Internal Server Error"


async def parse_body(
    request: Request, model: type[ModelT], *, optional: bool = False,
) -> ModelT | None:
    """Parse the JSON body into *model*; raises on bad JSON or missing fields.

    With ``optional`` an empty body yields None.
    """
    raw = await request.body()
    if optional and not raw.strip():
        return None
    return model.model_validate_json(raw)


def internal_error_response(
    exc: Exception, *, path: str, backend: str | None = None,
) -> PlainTextResponse:
    """Log *exc* with full detail and return a detail-free 500."""
    extra = {"path": path, "backend": backend}
    if isinstance(exc, BridgeError):
        extra.update(exc.log_extra())
    else:
        extra["error_code"] = type(exc).__name__
    logger.error(f"Request failed: {exc}", exc_info=exc, extra=extra)
    return PlainTextResponse(
        INTERNAL_ERROR_TEXT,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
