import time
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import  AsyncSession
from nexora.common.logging_setup import get_logger
from nexora.common.utils import now, success_response
from nexora.config.admin_config import admin_config
from nexora.db.dependencies import get_session

logger = get_logger("nexora.health")

STARTED_AT = time.monotonic()

root_router = APIRouter()
home_router = APIRouter()


@root_router.get("/")
async def root():
    return success_response({"message": "Nexora Backend is running", "timestamp": now()})


@home_router.get("/health")
async def health_check(session:AsyncSession=Depends(get_session)):
    stmt=select(1)

    try:
        await session.execute(stmt)
    except SQLAlchemyError:
        logger.exception("health.database_unreachable")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database connection error")

    return success_response({
        "message": "Health check passed",
        "service": admin_config.SERVICE_NAME,
        "status": "healthy",
        "timestamp": now(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    })
