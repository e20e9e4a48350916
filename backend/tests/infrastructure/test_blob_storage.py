"""Signed blob URLs: read-only, https-only, 15 minute window."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import pytest

from app.core.domain_types import SasPermission, SasProtocol
from app.infrastructure.blob_storage import BlobUrlIssuer

ISSUED_AT = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def issuer(blob_config):
    return BlobUrlIssuer(blob_config, clock=lambda: ISSUED_AT)


def _token(url: str) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}


def test_url_points_at_blob_in_container(issuer):
    grant = issuer.issue_read_url("report.pdf")
    parts = urlsplit(grant.url)
    assert parts.scheme == "https"
    assert parts.netloc == "testaccount.blob.core.windows.net"
    assert parts.path == "/reports/report.pdf"


def test_token_is_read_only_and_https_only(issuer):
    token = _token(issuer.issue_read_url("report.pdf").url)
    assert token["sp"] == "r"
    assert token["spr"] == "https"
    assert token["sr"] == "b"
    assert token["sig"]


def test_window_is_fifteen_minutes_from_issuance(issuer):
    grant = issuer.issue_read_url("report.pdf")
    token = _token(grant.url)
    assert grant.starts_on == ISSUED_AT
    assert grant.expires_on - grant.starts_on == timedelta(minutes=15)
    assert token["st"] == "2026-03-01T12:00:00Z"
    assert token["se"] == "2026-03-01T12:15:00Z"


def test_grant_records_permission_and_protocol(issuer):
    grant = issuer.issue_read_url("report.pdf")
    assert grant.blob_name == "report.pdf"
    assert grant.permission is SasPermission.READ
    assert grant.protocol is SasProtocol.HTTPS


def test_blob_name_is_url_quoted_but_keeps_slashes(issuer):
    grant = issuer.issue_read_url("2026/q1 summary.pdf")
    assert urlsplit(grant.url).path == "/reports/2026/q1%20summary.pdf"


def test_signature_depends_on_blob_name(issuer):
    a = _token(issuer.issue_read_url("a.pdf").url)["sig"]
    b = _token(issuer.issue_read_url("b.pdf").url)["sig"]
    assert a != b


def test_nonexistent_blob_still_signed(issuer):
    # Existence is never checked; the storage service rejects unknown blobs
    assert _token(issuer.issue_read_url("does-not-exist.bin").url)["sig"]


def test_custom_endpoint_suffix(blob_config):
    config = blob_config.model_copy(update={"endpoint_suffix": "core.chinacloudapi.cn"})
    grant = BlobUrlIssuer(config, clock=lambda: ISSUED_AT).issue_read_url("x")
    assert urlsplit(grant.url).netloc == "testaccount.blob.core.chinacloudapi.cn"
