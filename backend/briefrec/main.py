"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from sqlalchemy import text

from briefrec.config import get_settings
from briefrec.models.base import engine, AsyncSessionLocal, Base
from briefrec.api.v1 import router as api_v1_router

# Register every model on Base.metadata before create_all
from briefrec.models.user import User  # noqa: F401
from briefrec.models.category import Category  # noqa: F401
from briefrec.models.brief import Brief, BriefSource  # noqa: F401
from briefrec.models.engagement import Review, BriefUpvote, SavedBrief, BriefView  # noqa: F401
from briefrec.models.recommendation_profile import RecommendationProfile  # noqa: F401

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Starting %s...", settings.app_name)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")
    yield
    logger.info("Shutting down...")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Personalized brief recommendations: taste profiles and relevance scores",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}


@app.get("/health/detailed")
async def detailed_health_check():
    checks = {}

    # Database
    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            checks["database"] = {"ok": True}
    except Exception as e:
        checks["database"] = {"ok": False, "message": str(e)}

    # Redis (progress store and Celery broker)
    try:
        r = redis.from_url(settings.redis_url, socket_timeout=5)
        r.ping()
        checks["redis"] = {"ok": True}
    except Exception as e:
        checks["redis"] = {"ok": False, "message": str(e)}

    # Celery workers
    try:
        from briefrec.tasks.celery_app import celery_app
        inspect = celery_app.control.inspect(timeout=5)
        active_workers = inspect.active()
        checks["celery_workers"] = {
            "ok": bool(active_workers),
            "workers": list(active_workers.keys()) if active_workers else [],
        }
    except Exception as e:
        checks["celery_workers"] = {"ok": False, "message": str(e)}

    all_ok = all(check.get("ok", False) for check in checks.values())
    status = "healthy" if all_ok else "degraded"

    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
