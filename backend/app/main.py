"""DB Bridge API: standalone FastAPI host for the plugin.

Invariants:
    - Plugin routes registered in the lifespan, through the same init(router)
      entry point a host process would call
    - Global error handlers answer plain text 500, never internal details
    - Pools are closed on shutdown via Plugin.exit()

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - create_app() takes the plugin as an argument so tests can inject pools
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.error_handlers import register_error_handlers
from app.config import get_settings
from app.infrastructure.observability import setup_logging
from app.plugin import Plugin, default_plugin

logger = logging.getLogger(__name__)


def create_app(plugin: Plugin | None = None) -> FastAPI:
    plugin = plugin or default_plugin

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_format)
        await plugin.init(app.router)
        logger.info("DB Bridge API started")
        yield
        logger.info("DB Bridge API shutting down")
        await plugin.exit()

    app = FastAPI(
        title="DB Bridge API",
        description=plugin.info.description,
        lifespan=lifespan,
    )
    register_error_handlers(app)
    return app


app = create_app()
