"""API v1 router aggregation."""

from fastapi import APIRouter

from briefrec.api.v1.recommendations import router as recommendations_router

router = APIRouter(prefix="/api/v1")

router.include_router(recommendations_router)
