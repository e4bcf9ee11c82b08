# course_class.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from coursework.utils.time import get_current_time


class CourseClass(SQLModel, table=True):
    __tablename__ = "classes"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=50, unique=True, index=True)
    name: str = Field(max_length=100)
    description: str = ""
    teacher_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=get_current_time)
