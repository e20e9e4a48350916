"""Request/Response Schemas: JSON bodies accepted and returned by the extension routes.

Invariants:
    - SQL text is accepted verbatim (no length limits, no stripping)
    - get_blob_url accepts the camelCase key blobName used by the host UI

Design Decisions:
    - populate_by_name on BlobUrlRequest: tests and Python callers may use blob_name
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SqlQueryRequest(BaseModel):
    """Raw SQL plus optional positional driver parameters."""
    query: str
    params: list[Any] = Field(default_factory=list)


class TableListRequest(BaseModel):
    schema_name: str | None = Field(None, alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class TableDataRequest(BaseModel):
    table: str = Field(min_length=1)
    columns: list[str] = Field(default_factory=list)


class BlobUrlRequest(BaseModel):
    blob_name: str = Field(alias="blobName", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class BlobUrlResponse(BaseModel):
    blob_url: str
