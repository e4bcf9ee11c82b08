# question.py
from sqlmodel import SQLModel, Field, Column, UniqueConstraint
from typing import Optional
from datetime import datetime
import enum
from sqlalchemy import Enum as SQLAlchemyEnum, Text
from coursework.utils.time import get_current_time


class QuestionType(str, enum.Enum):
    CHOICE = "choice"
    FILL_BLANK = "fill_blank"
    TRUE_FALSE = "true_false"
    ESSAY = "essay"


OBJECTIVE_TYPES = (QuestionType.CHOICE, QuestionType.FILL_BLANK, QuestionType.TRUE_FALSE)


class Question(SQLModel, table=True):
    __tablename__ = "questions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "order", name="uq_question_assignment_order"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    assignment_id: int = Field(foreign_key="assignments.id", index=True)
    type: QuestionType = Field(sa_column=Column(SQLAlchemyEnum(QuestionType), nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    score: int = Field(default=10)
    order: int  # unique within the assignment
    # JSON array of {"key", "value"}; choice questions only
    options: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    # Single key / literal text, or a JSON array of keys for multi-select choice
    correct_answer: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    reference: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    explanation: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    created_at: datetime = Field(default_factory=get_current_time)

    @property
    def is_objective(self) -> bool:
        return self.type in OBJECTIVE_TYPES

    @property
    def is_subjective(self) -> bool:
        return self.type == QuestionType.ESSAY
