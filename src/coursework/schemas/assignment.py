# File: src/coursework/schemas/assignment.py

from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime

from ..models.assignment import AssignmentStatus
from .question import QuestionCreate, QuestionDetail

class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    class_id: int
    deadline: datetime
    total_score: int = Field(default=100, ge=1)
    status: Literal["draft", "published"] = "draft"
    questions: List[QuestionCreate] = []

class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    total_score: Optional[int] = Field(default=None, ge=1)
    status: Optional[AssignmentStatus] = None

class AssignmentRead(BaseModel):
    id: int
    title: str
    description: str
    class_id: int
    teacher_id: int
    deadline: datetime
    total_score: int
    status: AssignmentStatus
    published_at: Optional[datetime] = None
    grades_published: bool
    grades_published_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class AssignmentStatistics(BaseModel):
    submitted_count: int = 0   # submitted + graded
    graded_count: int = 0
    average_score: float = 0.0
    max_score: int = 0
    min_score: int = 0

class AssignmentDetail(AssignmentRead):
    questions: List[QuestionDetail] = []
    statistics: AssignmentStatistics = AssignmentStatistics()

class AssignmentListItem(BaseModel):
    id: int
    title: str
    class_id: int
    deadline: datetime
    total_score: int
    status: AssignmentStatus
    created_at: datetime
    published_at: Optional[datetime] = None
    submitted_count: int = 0
    graded_count: int = 0

class AssignmentList(BaseModel):
    items: List[AssignmentListItem]
    total: int
    page: int
    page_size: int
