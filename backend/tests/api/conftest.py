"""API fixtures: a FastAPI app with the plugin initialised on SQLite pools.

Invariants:
    - Two backends: "sql" (/sql_query) and "analytics" (/analytics_sql_query)
    - Blob issuer uses a fixed clock and a fake account key
"""

from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.api.error_handlers import register_error_handlers
from app.config import Settings
from app.infrastructure.blob_storage import BlobUrlIssuer
from app.infrastructure.database import PoolRegistry
from app.plugin import Plugin

ISSUED_AT = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
async def registry(make_pool):
    return PoolRegistry([make_pool("sql"), make_pool("analytics")])


@pytest.fixture
def plugin(registry, blob_config):
    return Plugin(
        settings=Settings(sql_backends=["sql", "analytics"]),
        registry=registry,
        issuer=BlobUrlIssuer(blob_config, clock=lambda: ISSUED_AT),
    )


@pytest.fixture
async def client(plugin):
    app = FastAPI()
    register_error_handlers(app)
    await plugin.init(app.router)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    await plugin.exit()
