"""Database Pools: one bounded async connection pool per named backend.

Invariants:
    - Every connection borrowed through BackendPool.connection() is returned
      to the same pool exactly once, whether the body succeeds or raises
    - A pool never lends more than pool_size connections (no overflow)
    - After close(), connection() raises PoolClosedError; close() is idempotent
    - TLS is always requested; certificate validation is off only when the
      backend config sets ssl_insecure

Design Decisions:
    - Pools are owned by a PoolRegistry that the plugin constructs and passes
      to the routes. No module-level engine singletons.
    - SQLAlchemy AsyncEngine over a raw driver pool: pre-ping and
      checkout/return bookkeeping come from the queue pool
"""

import logging
import ssl
from collections.abc import Iterator
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from app.config import DatabaseConfig, Settings, load_database_config
from app.core.domain_types import BackendName
from app.core.errors import PoolClosedError

logger = logging.getLogger(__name__)

DRIVER = "postgresql+asyncpg"


def build_ssl_context(config: DatabaseConfig) -> ssl.SSLContext:
    """TLS context for a backend; unverified only in explicit insecure mode."""
    context = ssl.create_default_context()
    if config.ssl_insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def build_engine(config: DatabaseConfig) -> AsyncEngine:
    url = URL.create(
        DRIVER,
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
    )
    return create_async_engine(
        url,
        pool_size=config.pool_size,
        max_overflow=0,
        pool_timeout=config.pool_timeout,
        pool_pre_ping=True,
        connect_args={
            "ssl": build_ssl_context(config),
            "timeout": config.connect_timeout,
        },
    )


class BackendPool:
    """A named, bounded pool of connections to one backend database."""

    def __init__(self, name: BackendName | str, engine: AsyncEngine):
        self.name = BackendName(name)
        self.engine = engine
        self._closed = False

    @classmethod
    def from_config(cls, name: str, config: DatabaseConfig) -> "BackendPool":
        if config.ssl_insecure:
            logger.warning(
                f"TLS certificate validation disabled for backend '{name}'",
                extra={"backend": name},
            )
        return cls(name, build_engine(config))

    @property
    def closed(self) -> bool:
        return self._closed

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """Borrow one connection; it goes back to this pool on exit."""
        if self._closed:
            raise PoolClosedError(self.name)
        async with self.engine.connect() as conn:
            yield conn

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.engine.dispose()
        logger.info(
            f"All connections for '{self.name}' have been closed",
            extra={"backend": self.name},
        )

    def stats(self) -> dict[str, int]:
        """Pool statistics for monitoring."""
        pool = self.engine.pool
        return {
            "max_size": pool.size(),
            "checked_out": pool.checkedout(),
            "idle": pool.checkedin(),
        }


class PoolRegistry:
    """Ordered mapping of backend name -> BackendPool."""

    def __init__(self, pools: list[BackendPool]):
        self._pools: dict[str, BackendPool] = {}
        for pool in pools:
            if pool.name in self._pools:
                raise ValueError(f"Duplicate backend '{pool.name}'")
            self._pools[pool.name] = pool

    @classmethod
    def from_settings(cls, settings: Settings) -> "PoolRegistry":
        """Load every backend config (fail fast) and build its pool."""
        configs = {
            name: load_database_config(name) for name in settings.sql_backends
        }
        return cls([
            BackendPool.from_config(name, config)
            for name, config in configs.items()
        ])

    def get(self, name: str) -> BackendPool:
        return self._pools[name]

    def names(self) -> list[str]:
        return list(self._pools)

    def __iter__(self) -> Iterator[BackendPool]:
        return iter(self._pools.values())

    def __len__(self) -> int:
        return len(self._pools)

    async def close_all(self) -> None:
        """Close every pool; the first failure is re-raised after all attempts."""
        first_error: Exception | None = None
        for pool in self._pools.values():
            try:
                await pool.close()
            except Exception as e:
                logger.error(
                    f"Error closing database connections: {e}",
                    exc_info=True, extra={"backend": pool.name},
                )
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
