# File: src/coursework/schemas/submission.py

from pydantic import BaseModel
from typing import List, Literal, Optional
from datetime import datetime

from ..models.submission import SubmissionStatus
from .assignment import AssignmentRead
from .question import QuestionStudentView

class AnswerRequest(BaseModel):
    question_id: int
    content: str

class SubmissionRequest(BaseModel):
    assignment_id: int
    answers: List[AnswerRequest]
    status: Literal["draft", "submitted"] = "draft"

class AnswerRead(BaseModel):
    id: int
    submission_id: int
    question_id: int
    content: str
    score: int
    is_correct: Optional[bool] = None
    graded_at: Optional[datetime] = None
    feedback: str = ""

    class Config:
        from_attributes = True

class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    status: SubmissionStatus
    score: int
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[int] = None
    feedback: str = ""

    class Config:
        from_attributes = True

class SubmissionDetail(SubmissionRead):
    answers: List[AnswerRead] = []

class StudentAnswerView(BaseModel):
    question_id: int
    content: str
    score: Optional[int] = None        # hidden until grades are published
    is_correct: Optional[bool] = None
    feedback: Optional[str] = None

class StudentSubmissionView(BaseModel):
    id: int
    status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    score: Optional[int] = None
    feedback: Optional[str] = None
    answers: List[StudentAnswerView] = []

class StudentAssignmentView(BaseModel):
    assignment: AssignmentRead
    submission: Optional[StudentSubmissionView] = None
    questions: List[QuestionStudentView] = []

class StudentSubmissionList(BaseModel):
    items: List[StudentSubmissionView]
    total: int
    page: int
    page_size: int
