# File: src/coursework/schemas/grading.py

from pydantic import BaseModel, Field
from typing import List, Optional

from .question import QuestionRead
from .submission import AnswerRead, SubmissionDetail, SubmissionRead

class GradeAnswerRequest(BaseModel):
    question_id: int
    score: int = Field(ge=0)
    feedback: str = ""

class GradeSubmissionRequest(BaseModel):
    answers: List[GradeAnswerRequest]
    overall_feedback: str = ""

class BatchGradeItem(BaseModel):
    submission_id: int
    answers: List[GradeAnswerRequest]
    overall_feedback: str = ""

class BatchGradeRequest(BaseModel):
    submissions: List[BatchGradeItem]

class BatchGradeResult(BaseModel):
    submission_id: int
    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None

class GradingProgress(BaseModel):
    assignment_id: int
    total_submissions: int
    graded_count: int
    ungraded_count: int
    grading_progress: float
    grades_published: bool

class SubmissionStatistics(BaseModel):
    total_submissions: int = 0
    draft_submissions: int = 0
    submitted_submissions: int = 0
    graded_submissions: int = 0

class QuestionWithAnswer(BaseModel):
    question: QuestionRead
    answer: Optional[AnswerRead] = None

class GradingDetail(BaseModel):
    submission: SubmissionDetail
    questions: List[QuestionWithAnswer]

class SubmissionListForGrading(BaseModel):
    items: List[SubmissionRead]
    total: int
    page: int
    page_size: int
