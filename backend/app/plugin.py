"""Plugin Lifecycle: the init / exit / info surface a host process loads.

Invariants:
    - init(router) registers every route on the host's router and owns the
      pools it builds; configuration errors surface here, before any route exists
    - exit() closes every pool; calling it twice is harmless, and any query
      after it fails with PoolClosedError (answered as 500)
    - POST /probe is registered regardless of database reachability
    - A failed startup connection check closes every pool before re-raising

Design Decisions:
    - Plugin instance holds registry and issuer; routes receive them at build
      time. The module-level init/exit/info mirror the host's plugin contract.
"""

import logging

from fastapi import APIRouter

from app.api.routes import blob_url, health, probe, sql_query
from app.config import Settings, get_settings, load_blob_config
from app.core.domain_types import PluginInfo
from app.infrastructure.blob_storage import BlobUrlIssuer
from app.infrastructure.database import PoolRegistry
from app.services.query_executor import probe_connection

logger = logging.getLogger(__name__)

PLUGIN_INFO = PluginInfo(
    id="postgresql",
    name="PostgreSQL Plugin",
    description=(
        "Runs SQL against pooled PostgreSQL backends and issues signed "
        "read URLs for Azure blobs."
    ),
)


class Plugin:
    """Server extension exposing SQL passthrough and signed blob URLs."""

    info = PLUGIN_INFO

    def __init__(
        self,
        settings: Settings | None = None,
        registry: PoolRegistry | None = None,
        issuer: BlobUrlIssuer | None = None,
    ):
        self._settings = settings
        self.registry = registry
        self.issuer = issuer

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    async def init(self, router: APIRouter) -> None:
        """Build pools and issuer (fail fast on config) and register routes."""
        settings = self.settings
        if self.issuer is None and settings.blob_url_enabled:
            self.issuer = BlobUrlIssuer(load_blob_config())
        if self.registry is None:
            self.registry = PoolRegistry.from_settings(settings)

        router.include_router(probe.build_router())
        router.include_router(sql_query.build_router(self.registry))
        if self.issuer is not None:
            router.include_router(blob_url.build_router(self.issuer))
        router.include_router(health.build_router(self.registry))

        if settings.verify_connections_on_startup:
            try:
                for pool in self.registry:
                    await probe_connection(
                        pool,
                        ignore_timeouts=settings.connect_probe_ignore_timeouts,
                    )
            except Exception:
                await self.registry.close_all()
                raise

        logger.info(
            f"Plugin loaded! Backends: {', '.join(self.registry.names())}",
        )

    async def exit(self) -> None:
        """Drain and close every pool."""
        if self.registry is not None:
            await self.registry.close_all()
        logger.info("Plugin exited")


default_plugin = Plugin()
info = PLUGIN_INFO


async def init(router: APIRouter) -> None:
    await default_plugin.init(router)


async def exit() -> None:
    await default_plugin.exit()
