from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pta.core.config import settings
from pta.core.database import get_db
from pta.core.errors import StoreUnavailableError
from pta.core.logging import logger
from pta.services.base_service import STORE_UNAVAILABLE_ERRORS

router = APIRouter(tags=["Health"])


@router.get("/api/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus a round-trip to the database"""
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, *STORE_UNAVAILABLE_ERRORS) as e:
        logger.error(f"Health check failed: {type(e).__name__}")
        raise StoreUnavailableError() from e
    return {"status": "healthy", "version": settings.VERSION, "database": "connected"}
