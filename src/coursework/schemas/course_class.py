# File: src/coursework/schemas/course_class.py

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

class CourseClassCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    description: str = ""

class CourseClassRead(BaseModel):
    id: int
    code: str
    name: str
    description: str
    teacher_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class CourseClassUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
