from pydantic import BaseModel
from typing import List, Optional
from enum import Enum

# ==================== ENUMS ====================

class ActivityType(str, Enum):
    TRUE_FALSE = "True/False"
    MULTIPLE_OPTIONS = "Multiple options"
    TEXT = "Text"

# ==================== ACTIVITY MODELS ====================

class ActivityOption(BaseModel):
    text: str
    correct: bool = False

class ActivityCreate(BaseModel):
    type: ActivityType
    title: Optional[str] = None
    description: Optional[str] = None
    isTrue: Optional[bool] = None
    options: Optional[List[ActivityOption]] = None

    class Config:
        use_enum_values = True

class ActivityUpdate(BaseModel):
    type: Optional[ActivityType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    isTrue: Optional[bool] = None
    options: Optional[List[ActivityOption]] = None

    class Config:
        use_enum_values = True

class AnswerCheck(BaseModel):
    answer: str

class AnswerResult(BaseModel):
    activity_id: str
    correct: bool
