# File: src/coursework/schemas/question.py

from pydantic import BaseModel, Field
from typing import List, Optional

from ..models.question import QuestionType

# --- Option Schemas ---

class QuestionOption(BaseModel):
    key: str     # A, B, C, D
    value: str

# --- Question Schemas ---

class QuestionCreate(BaseModel):
    type: QuestionType
    content: str = Field(min_length=1)
    score: int = Field(ge=1)
    order: int = Field(ge=1)
    options: List[QuestionOption] = []
    correct_answer: str = ""
    reference: str = ""
    explanation: str = ""
    is_multiple: bool = False  # choice questions only

class QuestionUpdate(BaseModel):
    content: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=1)
    order: Optional[int] = Field(default=None, ge=1)
    options: Optional[List[QuestionOption]] = None
    correct_answer: Optional[str] = None
    reference: Optional[str] = None
    explanation: Optional[str] = None
    is_multiple: Optional[bool] = None  # choice questions only

class QuestionRead(BaseModel):
    id: int
    assignment_id: int
    type: QuestionType
    content: str
    score: int
    order: int
    options: str = ""
    correct_answer: str = ""
    reference: str = ""
    explanation: str = ""

    class Config:
        from_attributes = True

class QuestionDetail(QuestionRead):
    option_list: List[QuestionOption] = []
    is_multiple: bool = False
    correct_keys: List[str] = []

class QuestionStudentView(BaseModel):
    """A question as shown to students: no answers, references or explanations."""
    id: int
    type: QuestionType
    content: str
    score: int
    order: int
    option_list: List[QuestionOption] = []
    is_multiple: bool = False
