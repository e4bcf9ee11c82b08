from coursework.repositories.answer_repository import AnswerRepository
from coursework.repositories.assignment_repository import AssignmentRepository
from coursework.repositories.cache import NoOpCache
from coursework.repositories.class_repository import ClassRepository
from coursework.repositories.question_repository import QuestionRepository
from coursework.repositories.submission_repository import SubmissionRepository

__all__ = [
    "AnswerRepository",
    "AssignmentRepository",
    "ClassRepository",
    "NoOpCache",
    "QuestionRepository",
    "SubmissionRepository",
]
