"""Root conftest: shared pool fixtures over SQLite (aiosqlite).

Invariants:
    - Tests never reach a real PostgreSQL or Azure endpoint
    - Every pool created through make_pool is closed after the test

Design Decisions:
    - File-backed SQLite per backend (tmp_path): a real queue pool with a
      size cap, shared by every connection the pool lends
"""

import base64

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from app.config import BlobStorageConfig
from app.infrastructure.database import BackendPool

TEST_ACCOUNT_KEY = base64.b64encode(b"test-storage-account-key").decode()


@pytest.fixture
async def make_pool(tmp_path):
    """Factory: make_pool(name, pool_size) -> BackendPool over its own SQLite file."""
    pools: list[BackendPool] = []

    def _make(name: str = "sql", pool_size: int = 2) -> BackendPool:
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / name}.db",
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=5,
        )
        pool = BackendPool(name, engine)
        pools.append(pool)
        return pool

    yield _make
    for pool in pools:
        await pool.close()


@pytest.fixture
async def sql_pool(make_pool):
    return make_pool("sql")


@pytest.fixture
def blob_config():
    return BlobStorageConfig(
        account_name="testaccount",
        container_name="reports",
        account_key=TEST_ACCOUNT_KEY,
    )


async def seed(pool: BackendPool, *statements: str) -> None:
    """Run setup statements on one connection and commit."""
    async with pool.connection() as conn:
        for statement in statements:
            await conn.exec_driver_sql(statement)
        await conn.commit()


@pytest.fixture
def seed_pool():
    return seed
