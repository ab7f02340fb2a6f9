"""
Armory ledger service.

``create_app()`` builds the FastAPI application; ``app`` is the instance
uvicorn serves. Run with ``python -m armory.api.main``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from armory.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from armory.api.middleware.error_handler import setup_exception_handlers
from armory.api.routes import (
    assign_router,
    expend_router,
    health_router,
    purchase_router,
    settings_router,
    transfers_router,
    views_router,
)
from armory.config import configure_logging, get_logger, get_settings
from armory.infrastructure.storage.sqlite import close_pool, get_pool
from armory.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    settings_router,
    purchase_router,
    transfers_router,
    assign_router,
    expend_router,
    views_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Migrate and open the ledger before serving; close the pool after."""
    settings = get_settings()
    logger.info(
        "ledger_service_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    results = await run_migrations()
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("ledger_schema_incomplete", failed=failed)
        raise RuntimeError(f"Ledger migrations failed: {', '.join(failed)}")
    await get_pool()
    logger.info("ledger_service_ready", migrations_applied=len(results))

    try:
        yield
    finally:
        await close_pool()
        logger.info("ledger_service_stopped")


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()

    app = FastAPI(
        title="Armory Ledger API",
        description="Purchases, transfers, assignments and expenditures across bases",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Last added runs first: errors are caught inside the request log
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "armory.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
