"""Blob URL Route: issues signed read URLs for single blobs.

Invariants:
    - Success body is exactly {"blob_url": <signed URL>}
    - Body and signing failures answer 500 plain text; detail stays in the server log
"""

from typing import Any

from fastapi import APIRouter, Request

from app.api.routes.dispatch_helpers import internal_error_response, parse_body
from app.infrastructure.blob_storage import BlobUrlIssuer
from app.schemas.requests import BlobUrlRequest, BlobUrlResponse


def build_router(issuer: BlobUrlIssuer) -> APIRouter:
    router = APIRouter(tags=["blob"])

    @router.post("/get_blob_url", response_model=BlobUrlResponse)
    async def get_blob_url(request: Request) -> Any:
        try:
            body = await parse_body(request, BlobUrlRequest)
            grant = issuer.issue_read_url(body.blob_name)
            return BlobUrlResponse(blob_url=grant.url)
        except Exception as e:
            return internal_error_response(e, path=request.url.path)

    return router
