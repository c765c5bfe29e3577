import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.activities.activity_service import now_millis
from app.database import parse_object_id, serialize_mongo, serialize_many

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = ("_id", "created_by", "created_at")

# ==================== COURSE CRUD ====================

async def create_course(db: AsyncIOMotorDatabase, course_data: dict, created_by: str) -> dict:
    """Create new course owned by the admin that submitted it"""
    course = {key: value for key, value in course_data.items() if key not in PROTECTED_FIELDS}
    course["created_by"] = created_by
    course["created_at"] = now_millis()

    result = await db.courses.insert_one(course)
    course["_id"] = result.inserted_id

    logger.info("course_created", extra={"course_id": str(result.inserted_id), "created_by": created_by})
    return serialize_mongo(course)


async def get_all_courses(db: AsyncIOMotorDatabase) -> List[dict]:
    courses = await db.courses.find().to_list(length=None)
    return serialize_many(courses)


async def get_course_by_id(db: AsyncIOMotorDatabase, course_id: str) -> Optional[dict]:
    """Get course by id. Returns dict or None"""
    oid = parse_object_id(course_id)
    if oid is None:
        return None
    return serialize_mongo(await db.courses.find_one({"_id": oid}))


async def update_course_by_id(db: AsyncIOMotorDatabase, course_id: str, course_data: dict) -> Optional[dict]:
    oid = parse_object_id(course_id)
    if oid is None:
        return None

    changes = {key: value for key, value in course_data.items() if key not in PROTECTED_FIELDS}
    if not changes:
        return serialize_mongo(await db.courses.find_one({"_id": oid}))

    course = await db.courses.find_one_and_update(
        {"_id": oid},
        {"$set": changes},
        return_document=ReturnDocument.AFTER
    )
    return serialize_mongo(course)


async def delete_course_by_id(db: AsyncIOMotorDatabase, course_id: str) -> Optional[dict]:
    oid = parse_object_id(course_id)
    if oid is None:
        return None
    return serialize_mongo(await db.courses.find_one_and_delete({"_id": oid}))
