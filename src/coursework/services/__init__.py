from coursework.services.assignment_service import AssignmentService
from coursework.services.class_service import ClassService
from coursework.services.grading_service import GradingService
from coursework.services.question_service import QuestionService
from coursework.services.submission_service import SubmissionService

__all__ = ["AssignmentService", "ClassService", "GradingService", "QuestionService", "SubmissionService"]
