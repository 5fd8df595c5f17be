"""VITRINE — FastAPI Application Entry Point.

Daily e-commerce sales sheet → canonical records → KPIs and trends.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vitrine.cache import SalesDataCache
from vitrine.database import init_db, test_connection, db_url
from vitrine.scheduler.jobs import start_scheduler, stop_scheduler
from vitrine.api.sales_routes import router as sales_router
from vitrine.api.sync_routes import router as sync_router
from vitrine.core.logging import get_logger

logger = get_logger("main")

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 VITRINE starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    db_ok = test_connection()
    if db_ok:
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — snapshots will not be stored")
    if not IS_SERVERLESS:
        start_scheduler(app.state.cache)
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("VITRINE shut down")


def create_app(cache: SalesDataCache | None = None) -> FastAPI:
    """Build the API around a caller-owned cache."""
    app = FastAPI(
        title="VITRINE",
        description="Sales sheet normalization and analytics — canonical daily records, KPIs and trends per channel.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.cache = cache if cache is not None else SalesDataCache()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(sales_router)
    app.include_router(sync_router)

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        snapshot = app.state.cache.snapshot
        return {
            "status": "healthy",
            "service": "vitrine",
            "version": "1.0.0",
            "records": len(snapshot.records),
            "loaded_at": snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
            "database": "postgresql" if db_url.startswith("postgresql") else "sqlite",
        }

    return app


app = create_app()
