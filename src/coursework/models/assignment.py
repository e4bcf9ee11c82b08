# assignment.py
from sqlmodel import SQLModel, Field, Column
from typing import Optional
from datetime import datetime
import enum
from sqlalchemy import Enum as SQLAlchemyEnum
from coursework.utils.time import get_current_time


class AssignmentStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"


class Assignment(SQLModel, table=True):
    __tablename__ = "assignments"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    description: str = ""
    class_id: int = Field(foreign_key="classes.id", index=True)
    teacher_id: int = Field(foreign_key="users.id", index=True)
    deadline: datetime
    total_score: int = Field(default=100)
    status: AssignmentStatus = Field(
        default=AssignmentStatus.DRAFT,
        sa_column=Column(SQLAlchemyEnum(AssignmentStatus), nullable=False),
    )
    published_at: Optional[datetime] = None
    grades_published: bool = Field(default=False)
    grades_published_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    @property
    def is_published(self) -> bool:
        return self.status == AssignmentStatus.PUBLISHED

    def is_overdue(self, now: datetime) -> bool:
        return now > self.deadline
