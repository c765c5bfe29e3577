from pydantic import BaseModel
from typing import Optional

# ==================== COURSE MODELS ====================

class CourseCreate(BaseModel):
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None

    class Config:
        extra = "allow"

class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None

    class Config:
        extra = "allow"

class MessageResponse(BaseModel):
    status: int
    message: str
    id: Optional[str] = None
