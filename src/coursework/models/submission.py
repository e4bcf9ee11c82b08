# submission.py
from sqlmodel import SQLModel, Field, Column, UniqueConstraint
from typing import Optional
from datetime import datetime
import enum
from sqlalchemy import Enum as SQLAlchemyEnum, Text
from coursework.utils.time import get_current_time


class SubmissionStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    GRADED = "graded"


class Submission(SQLModel, table=True):
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    assignment_id: int = Field(foreign_key="assignments.id", index=True)
    student_id: int = Field(foreign_key="users.id", index=True)
    status: SubmissionStatus = Field(
        default=SubmissionStatus.DRAFT,
        sa_column=Column(SQLAlchemyEnum(SubmissionStatus), nullable=False),
    )
    score: int = Field(default=0)
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[int] = Field(default=None, foreign_key="users.id")
    feedback: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    @property
    def is_submitted(self) -> bool:
        return self.status in (SubmissionStatus.SUBMITTED, SubmissionStatus.GRADED)

    @property
    def is_graded(self) -> bool:
        return self.status == SubmissionStatus.GRADED


class Answer(SQLModel, table=True):
    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("submission_id", "question_id", name="uq_answer_submission_question"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    submission_id: int = Field(foreign_key="submissions.id", index=True)
    question_id: int = Field(foreign_key="questions.id", index=True)
    content: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    score: int = Field(default=0)
    is_correct: Optional[bool] = None  # objective questions only
    graded_at: Optional[datetime] = None
    feedback: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    updated_at: datetime = Field(default_factory=get_current_time)
