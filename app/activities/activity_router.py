from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.activities import activity_service as service
from app.activities.models import ActivityCreate, ActivityUpdate, AnswerCheck, AnswerResult
from app.auth.auth0_guard import auth0_guard
from app.auth.permissions import get_current_user, require_admin, require_token
from app.courses.models import MessageResponse
from app.database import get_db
from app.errors import map_service_error

router = APIRouter(
    prefix="/rest/activities",
    tags=["Activities"],
    dependencies=[Depends(auth0_guard)]
)

# ==================== ACTIVITY CRUD ====================

@router.post("", response_model=MessageResponse, status_code=201)
async def create_activity(
    activity: ActivityCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(require_admin)
):
    """Create new activity (admin only)"""
    try:
        created = await service.create_activity(db, activity.model_dump(exclude_unset=True), user["sub"])
    except Exception as e:
        raise map_service_error(e, "create_activity")

    return {"status": 201, "message": "Actividad creada correctamente", "id": created["_id"]}


@router.get("")
async def get_all_activities(db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        return await service.get_all_activities(db)
    except Exception as e:
        raise map_service_error(e, "get_all_activities")


@router.get("/viewed/{user_id}")
async def get_viewed_activities_by_user(
    user_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    token: str = Depends(require_token)
):
    """Activities the given user has marked as viewed"""
    try:
        return await service.get_viewed_activities_by_user(db, user_id)
    except Exception as e:
        raise map_service_error(e, "get_viewed_activities_by_user")


async def _get_existing_activity(db: AsyncIOMotorDatabase, activity_id: str) -> dict:
    try:
        activity = await service.get_activity_by_id(db, activity_id)
    except Exception as e:
        raise map_service_error(e, "get_activity_by_id")

    if not activity:
        raise HTTPException(status_code=404, detail="Actividad no encontrada")
    return activity


@router.get("/{activity_id}")
async def get_activity_by_id(
    activity_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    token: str = Depends(require_token)
):
    return await _get_existing_activity(db, activity_id)


@router.put("/{activity_id}", response_model=MessageResponse)
async def update_activity(
    activity_id: str,
    activity: ActivityUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(require_admin)
):
    await _get_existing_activity(db, activity_id)

    try:
        await service.update_activity(db, activity_id, activity.model_dump(exclude_unset=True))
    except Exception as e:
        raise map_service_error(e, "update_activity")

    return {"status": 200, "message": "Actividad actualizada correctamente"}


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(require_admin)
):
    await _get_existing_activity(db, activity_id)

    try:
        await service.delete_activity(db, activity_id)
    except Exception as e:
        raise map_service_error(e, "delete_activity")

    return {"status": 200, "message": "Actividad eliminada correctamente"}

# ==================== LEARNER ACTIONS ====================

@router.post("/{activity_id}/view", response_model=MessageResponse)
async def mark_activity_as_viewed(
    activity_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """Record that the caller has seen this activity"""
    try:
        await service.mark_activity_as_viewed(db, activity_id, user["sub"])
    except HTTPException:
        raise
    except Exception as e:
        raise map_service_error(e, "mark_activity_as_viewed")

    return {"status": 200, "message": "Actividad marcada como vista"}


@router.post("/{activity_id}/check", response_model=AnswerResult)
async def check_answer(
    activity_id: str,
    payload: AnswerCheck,
    db: AsyncIOMotorDatabase = Depends(get_db),
    token: str = Depends(require_token)
):
    activity = await _get_existing_activity(db, activity_id)

    try:
        correct = service.check_answer(payload.answer, activity)
    except service.NoCorrectOptionError:
        raise HTTPException(status_code=400, detail="La actividad no tiene una opción correcta configurada")

    return {"activity_id": activity_id, "correct": correct}
