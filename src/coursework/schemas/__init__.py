# src/coursework/schemas/__init__.py

from .assignment import AssignmentCreate, AssignmentUpdate, AssignmentRead, AssignmentDetail
from .question import QuestionCreate, QuestionUpdate, QuestionRead, QuestionDetail
from .submission import SubmissionRequest, SubmissionRead, SubmissionDetail
from .grading import GradeSubmissionRequest, BatchGradeRequest, BatchGradeResult, GradingProgress
