"""Blob Storage: read-only, time-boxed SAS URLs for single blobs.

Invariants:
    - Issued URLs grant read permission only, over https only
    - Validity window starts at issuance and lasts exactly SIGNED_URL_VALIDITY
    - Blob existence is not checked; expiry and permission enforcement
      belong to the storage service
    - Signing errors (bad key, bad parameters) propagate unchanged

Design Decisions:
    - Signing is local (HMAC over the account key), so issue_read_url is sync
    - Clock is injectable for deterministic tests
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from urllib.parse import quote

from azure.storage.blob import BlobSasPermissions, generate_blob_sas

from app.config import BlobStorageConfig
from app.core.domain_types import SIGNED_URL_VALIDITY, SasProtocol, SignedUrlGrant

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BlobUrlIssuer:
    """Builds signed read URLs for blobs in one account/container."""

    def __init__(
        self,
        config: BlobStorageConfig,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.config = config
        self._clock = clock

    @property
    def container_url(self) -> str:
        return (
            f"https://{self.config.account_name}.blob."
            f"{self.config.endpoint_suffix}/{self.config.container_name}"
        )

    def issue_read_url(self, blob_name: str) -> SignedUrlGrant:
        """Sign a read grant for *blob_name* valid for the next 15 minutes."""
        starts_on = self._clock()
        expires_on = starts_on + SIGNED_URL_VALIDITY
        token = generate_blob_sas(
            account_name=self.config.account_name,
            container_name=self.config.container_name,
            blob_name=blob_name,
            account_key=self.config.account_key,
            permission=BlobSasPermissions(read=True),
            start=starts_on,
            expiry=expires_on,
            protocol=SasProtocol.HTTPS.value,
        )
        url = f"{self.container_url}/{quote(blob_name, safe='~/')}?{token}"
        logger.info(
            "Issued signed blob URL",
            extra={"blob_name": blob_name},
        )
        return SignedUrlGrant(
            blob_name=blob_name,
            url=url,
            starts_on=starts_on,
            expires_on=expires_on,
        )
