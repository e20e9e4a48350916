"""Domain Types: values passed between the executor, the issuer and the routes.

Invariants:
    - QueryResult.rows preserves backend row order and column order
    - SignedUrlGrant is read-only, https-only, and expires_on - starts_on
      equals SIGNED_URL_VALIDITY
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - Frozen dataclasses: results are transient and never mutated after creation
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, NewType

BackendName = NewType("BackendName", str)
Row = dict[str, Any]

SIGNED_URL_VALIDITY = timedelta(minutes=15)


class SasPermission(str, Enum):
    """SAS permission letters granted by issued URLs."""
    READ = "r"


class SasProtocol(str, Enum):
    HTTPS = "https"


@dataclass(frozen=True)
class QueryResult:
    """Rows returned by one statement plus the row count reported for it."""
    rows: list[Row] = field(default_factory=list)
    row_count: int = 0


@dataclass(frozen=True)
class SignedUrlGrant:
    """A time-boxed read grant on a single blob."""
    blob_name: str
    url: str
    starts_on: datetime
    expires_on: datetime
    permission: SasPermission = SasPermission.READ
    protocol: SasProtocol = SasProtocol.HTTPS


@dataclass(frozen=True)
class PluginInfo:
    """Catalog metadata the host displays for this extension."""
    id: str
    name: str
    description: str
