"""FastAPI application for the shot analytics API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analytics.service import AnalyticsService
from config import configure_logging, get_settings
from database.connection import db
from database.db_manager import DatabaseManager

logger = logging.getLogger(__name__)


def build_analytics(manager: DatabaseManager, settings=None) -> AnalyticsService:
    """Wire the repositories into the analytics facade."""
    return AnalyticsService(
        shots=manager.shots,
        store=manager.rounds,
        courses=manager.courses,
        round_history=manager.rounds,
        settings=settings,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB pool on startup, close on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    await db.initialize(dsn=settings.database_url)
    app.state.db_manager = DatabaseManager(db.pool, settings)
    app.state.analytics = build_analytics(app.state.db_manager, settings)
    logger.info("analytics API started")
    yield
    await db.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shot Analytics API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from api.routers import analytics, caddie, rounds
    app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
    app.include_router(caddie.router, prefix="/api/caddie", tags=["caddie"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])

    @app.get("/api/health")
    async def health():
        healthy = await db.health_check()
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
