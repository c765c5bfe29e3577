import logging
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import MONGO_URL, MONGO_DB_NAME

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]


async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return db


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return the ObjectId for value, or None when it is not a valid id"""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_mongo(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_many(docs: list[dict]) -> list[dict]:
    return [serialize_mongo(doc) for doc in docs]


# ==================== DATABASE INDEXES ====================

async def create_indexes(database: AsyncIOMotorDatabase):
    """Create MongoDB indexes used by the lookup queries"""
    await database.activities.create_index("viewed_by")
    await database.activities.create_index("created_by")
    await database.courses.create_index("created_by")

    logger.info("indexes_created", extra={"collections": ["activities", "courses"]})
