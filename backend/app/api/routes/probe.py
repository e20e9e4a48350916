"""Probe Route: lets the host confirm the extension is loaded.

Invariants:
    - POST /probe always answers 204 with an empty body, whatever the state
      of the backends
"""

from fastapi import APIRouter, Response, status


def build_router() -> APIRouter:
    router = APIRouter(tags=["probe"])

    @router.post("/probe", status_code=status.HTTP_204_NO_CONTENT)
    async def probe() -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
