import logging
import time
from typing import List, Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.activities.models import ActivityType
from app.database import parse_object_id, serialize_mongo, serialize_many

logger = logging.getLogger(__name__)

# Fields a client may change after creation
UPDATABLE_FIELDS = ("type", "title", "description", "isTrue", "options")


class NoCorrectOptionError(ValueError):
    """Raised when a multiple-options activity has no option flagged correct"""


def now_millis() -> str:
    return str(int(time.time() * 1000))


def validate_options(options: list) -> None:
    """A multiple-options activity needs exactly one correct option"""
    correct = [option for option in options if option.get("correct") is True]
    if len(correct) != 1:
        raise HTTPException(
            status_code=400,
            detail="Las actividades de opción múltiple necesitan exactamente una opción correcta"
        )


# ==================== ACTIVITY CRUD ====================

async def create_activity(db: AsyncIOMotorDatabase, activity_data: dict, created_by: str) -> dict:
    """
    Create new activity
    created_by/created_at are always stamped server-side.
    Only the field matching the activity type is kept; a True/False without
    isTrue or a Multiple options without options stores neither.
    """
    activity = {
        key: value for key, value in activity_data.items()
        if key not in ("_id", "created_by", "created_at", "viewed_by")
    }
    activity["created_by"] = created_by
    activity["created_at"] = now_millis()
    activity["viewed_by"] = []

    activity_type = activity_data.get("type")
    if activity_type == ActivityType.TRUE_FALSE.value and "isTrue" in activity_data:
        activity["isTrue"] = activity_data["isTrue"]
        activity["options"] = []
    elif activity_type == ActivityType.MULTIPLE_OPTIONS.value and activity_data.get("options") is not None:
        validate_options(activity_data["options"])
        activity["options"] = activity_data["options"]
        activity["isTrue"] = None
    else:
        activity["isTrue"] = None
        activity["options"] = []

    result = await db.activities.insert_one(activity)
    activity["_id"] = result.inserted_id

    logger.info(
        "activity_created",
        extra={"activity_id": str(result.inserted_id), "type": activity_type, "created_by": created_by},
    )
    return serialize_mongo(activity)


async def get_all_activities(db: AsyncIOMotorDatabase) -> List[dict]:
    activities = await db.activities.find().to_list(length=None)
    return serialize_many(activities)


async def get_activity_by_id(db: AsyncIOMotorDatabase, activity_id: str) -> Optional[dict]:
    """Get activity by id. Returns dict or None"""
    oid = parse_object_id(activity_id)
    if oid is None:
        return None
    return serialize_mongo(await db.activities.find_one({"_id": oid}))


async def update_activity(db: AsyncIOMotorDatabase, activity_id: str, update_data: dict) -> Optional[dict]:
    """
    Merge the allowed fields of update_data into the activity
    Returns the updated activity or None when it does not exist
    """
    oid = parse_object_id(activity_id)
    if oid is None:
        return None

    changes = {key: value for key, value in update_data.items() if key in UPDATABLE_FIELDS}
    if "options" in changes:
        validate_options(changes["options"] or [])

    if not changes:
        return serialize_mongo(await db.activities.find_one({"_id": oid}))

    activity = await db.activities.find_one_and_update(
        {"_id": oid},
        {"$set": changes},
        return_document=ReturnDocument.AFTER
    )
    return serialize_mongo(activity)


async def delete_activity(db: AsyncIOMotorDatabase, activity_id: str) -> Optional[dict]:
    oid = parse_object_id(activity_id)
    if oid is None:
        return None
    return serialize_mongo(await db.activities.find_one_and_delete({"_id": oid}))


# ==================== VIEW TRACKING ====================

async def mark_activity_as_viewed(db: AsyncIOMotorDatabase, activity_id: str, user_id: str) -> None:
    """Add user_id to viewed_by; a repeated view does not write"""
    oid = parse_object_id(activity_id)
    activity = await db.activities.find_one({"_id": oid}) if oid is not None else None
    if not activity:
        raise HTTPException(status_code=404, detail="Actividad no encontrada")

    viewed_by = activity.get("viewed_by") or []
    if user_id in viewed_by:
        return

    viewed_by.append(user_id)
    await db.activities.update_one({"_id": oid}, {"$set": {"viewed_by": viewed_by}})


async def get_viewed_activities_by_user(db: AsyncIOMotorDatabase, user_id: str) -> List[dict]:
    activities = await db.activities.find({"viewed_by": user_id}).to_list(length=None)
    return serialize_many(activities)


# ==================== ANSWERS ====================

def check_answer(answer: str, activity: dict) -> bool:
    """
    Compare a submitted answer with the stored solution
    Text activities are never auto-graded and always return False.
    """
    activity_type = activity.get("type")

    if activity_type == ActivityType.TRUE_FALSE.value:
        is_true = activity.get("isTrue")
        if is_true is None:
            return False
        return answer == str(is_true).lower()

    if activity_type == ActivityType.MULTIPLE_OPTIONS.value:
        correct_option = next(
            (option for option in activity.get("options") or [] if option.get("correct") is True),
            None
        )
        if correct_option is None:
            raise NoCorrectOptionError("No correct option configured")
        return answer == correct_option.get("text")

    return False
