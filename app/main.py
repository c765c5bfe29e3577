import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.activities.activity_router import router as activity_router
from app.config import CORS_ORIGINS, LOG_LEVEL
from app.courses.course_router import router as course_router
from app.database import create_indexes, db
from app.errors import register_exception_handlers
from app.system.health_router import router as health_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Netex Courses API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# ==================== ROUTER REGISTRATION ====================
app.include_router(health_router)
app.include_router(course_router)
app.include_router(activity_router)
# ============================================================


@app.on_event("startup")
async def startup_event():
    await create_indexes(db)
    logger.info("startup_complete")
