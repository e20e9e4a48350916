"""Error Handlers: global exception handlers for the standalone app.

Invariants:
    - Exception (catch-all) -> 500 plain text, never leaks internal details

Design Decisions:
    - Route handlers parse their own bodies and convert their own failures;
      this handler only covers anything raised outside a handler's try block
"""

from fastapi import FastAPI, Request

from app.api.routes.dispatch_helpers import internal_error_response


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_generic_error_handler(app)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        return internal_error_response(exc, path=request.url.path)
