"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tumbi.db.session import get_db
from tumbi.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.
    Returns service status and whether the database answers.
    """
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "version": settings.VERSION,
        "service": settings.PROJECT_NAME,
        "database": db_status,
    }


@router.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "message": "Tumbi API - construction materials and services marketplace",
        "version": settings.VERSION,
        "docs": f"{settings.API_PREFIX}/docs",
    }
