from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.auth.auth0_guard import auth0_guard
from app.auth.permissions import require_admin, require_token
from app.courses import course_service as service
from app.courses.models import CourseCreate, CourseUpdate, MessageResponse
from app.database import get_db
from app.errors import internal_error, map_service_error

router = APIRouter(
    prefix="/rest/courses",
    tags=["Course Management"],
    dependencies=[Depends(auth0_guard)]
)

# ==================== POSTS ====================

@router.post("", response_model=MessageResponse, status_code=201)
async def create_course(
    course: CourseCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(require_admin)
):
    """Create new course (admin only)"""
    try:
        created = await service.create_course(db, course.model_dump(exclude_unset=True), user["sub"])
    except Exception as e:
        raise map_service_error(e, "create_course")

    return {"status": 201, "message": "Curso creado correctamente", "id": created["_id"]}

# ==================== GETS ====================

@router.get("")
async def get_all_courses(db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        return await service.get_all_courses(db)
    except Exception as e:
        raise map_service_error(e, "get_all_courses")


async def _get_existing_course(db: AsyncIOMotorDatabase, course_id: str) -> dict:
    try:
        course = await service.get_course_by_id(db, course_id)
    except Exception as e:
        raise map_service_error(e, "get_course_by_id")

    if not course:
        raise HTTPException(status_code=404, detail="Curso no encontrado")
    return course


@router.get("/{course_id}")
async def get_course_by_id(
    course_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    token: str = Depends(require_token)
):
    return await _get_existing_course(db, course_id)

# ==================== PUTS ====================

@router.put("/{course_id}", response_model=MessageResponse)
async def update_course_by_id(
    course_id: str,
    course: CourseUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(require_admin)
):
    await _get_existing_course(db, course_id)

    try:
        await service.update_course_by_id(db, course_id, course.model_dump(exclude_unset=True))
    except Exception as e:
        raise map_service_error(e, "update_course_by_id")

    return {"status": 200, "message": "Curso actualizado correctamente"}

# ==================== DELETES ====================

@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course_by_id(
    course_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(require_admin)
):
    await _get_existing_course(db, course_id)

    try:
        await service.delete_course_by_id(db, course_id)
    except Exception as e:
        raise internal_error(e, "delete_course_by_id")

    return {"status": 200, "message": "Curso eliminado correctamente"}
