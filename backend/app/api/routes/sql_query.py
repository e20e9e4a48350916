"""SQL Routes: one route family per backend pool.

Invariants:
    - Backend "sql" serves /sql_query, /sql_tables, /sql_table_data
    - Any other backend <name> serves /<name>_sql_query, /<name>_sql_tables,
      /<name>_sql_table_data
    - Each route is bound to exactly one pool when the router is built
    - Any failure, including an unparseable or incomplete body, answers 500
      plain text; detail stays in the server log

Design Decisions:
    - Pools are captured per route at build time (dependency injection by
      closure), so handlers never look pools up from module state
    - No authentication here: the host authenticates before dispatching
"""

import logging
from typing import Any

from fastapi import APIRouter, Request

from app.api.routes.dispatch_helpers import internal_error_response, parse_body
from app.config import DEFAULT_BACKEND
from app.infrastructure.database import BackendPool, PoolRegistry
from app.schemas.requests import SqlQueryRequest, TableDataRequest, TableListRequest
from app.services.query_executor import execute, list_tables, select_columns

logger = logging.getLogger(__name__)


def route_prefix(backend: str) -> str:
    if backend == DEFAULT_BACKEND:
        return DEFAULT_BACKEND
    return f"{backend}_sql"


def build_router(registry: PoolRegistry) -> APIRouter:
    router = APIRouter(tags=["sql"])
    for pool in registry:
        _register_backend_routes(router, pool)
    return router


def _register_backend_routes(router: APIRouter, pool: BackendPool) -> None:
    prefix = route_prefix(pool.name)

    @router.post(f"/{prefix}_query", name=f"{prefix}_query")
    async def run_query(request: Request) -> Any:
        """Run the raw query and return its rows."""
        try:
            body = await parse_body(request, SqlQueryRequest)
            result = await execute(pool, body.query, body.params)
            return result.rows
        except Exception as e:
            return internal_error_response(
                e, path=request.url.path, backend=pool.name,
            )

    @router.post(f"/{prefix}_tables", name=f"{prefix}_tables")
    async def tables(request: Request) -> Any:
        try:
            body = await parse_body(request, TableListRequest, optional=True)
            return await list_tables(pool, body.schema_name if body else None)
        except Exception as e:
            return internal_error_response(
                e, path=request.url.path, backend=pool.name,
            )

    @router.post(f"/{prefix}_table_data", name=f"{prefix}_table_data")
    async def table_data(request: Request) -> Any:
        try:
            body = await parse_body(request, TableDataRequest)
            result = await select_columns(pool, body.table, body.columns)
            return result.rows
        except Exception as e:
            return internal_error_response(
                e, path=request.url.path, backend=pool.name,
            )
