# src/coursework/models/__init__.py

# Centralizes the table imports so SQLModel.metadata knows every table
# before create_all or Alembic autogenerate runs.

from .user import User, UserRole
from .course_class import CourseClass
from .assignment import Assignment, AssignmentStatus
from .question import Question, QuestionType, OBJECTIVE_TYPES
from .submission import Submission, SubmissionStatus, Answer


__all__ = [
    "User",
    "UserRole",
    "CourseClass",
    "Assignment",
    "AssignmentStatus",
    "Question",
    "QuestionType",
    "OBJECTIVE_TYPES",
    "Submission",
    "SubmissionStatus",
    "Answer",
]
