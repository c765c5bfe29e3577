import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """Liveness plus a ping to MongoDB"""
    try:
        await db.command("ping")
    except PyMongoError as exc:
        logger.warning("health_mongo_down", extra={"error": str(exc)})
        return JSONResponse(status_code=503, content={"status": "degraded", "mongo": "DOWN"})
    return {"status": "ok", "mongo": "UP"}
