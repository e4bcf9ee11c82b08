# File location: src/coursework/utils/errors.py
"""
Error kinds raised by the workflow services.

Every failure a caller is expected to handle is a ``CourseworkError`` carrying
an ``ErrorKind``. The HTTP layer maps the kind to a status code; nothing
downstream inspects the message text.
"""
import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    INVALID_STATE = "invalid_state"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    VALIDATION_ERROR = "validation_error"


class CourseworkError(Exception):
    kind: ErrorKind = ErrorKind.INVALID_STATE
    default_message = "operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# --- Kinds ---

class NotFoundError(CourseworkError):
    kind = ErrorKind.NOT_FOUND
    default_message = "resource not found"


class PermissionDeniedError(CourseworkError):
    kind = ErrorKind.PERMISSION_DENIED
    default_message = "permission denied"


class InvalidStateError(CourseworkError):
    kind = ErrorKind.INVALID_STATE
    default_message = "operation not allowed in the current state"


class DeadlineExceededError(CourseworkError):
    kind = ErrorKind.DEADLINE_EXCEEDED
    default_message = "assignment deadline has passed"


class InputValidationError(CourseworkError):
    kind = ErrorKind.VALIDATION_ERROR
    default_message = "invalid input"


# --- Not found ---

class AssignmentNotFoundError(NotFoundError):
    default_message = "assignment not found"


class QuestionNotFoundError(NotFoundError):
    default_message = "question not found"


class SubmissionNotFoundError(NotFoundError):
    default_message = "submission not found"


class ClassNotFoundError(NotFoundError):
    default_message = "class not found"


# --- Invalid state ---

class AssignmentNotPublishedError(InvalidStateError):
    default_message = "assignment is not published"


class AlreadyPublishedError(InvalidStateError):
    default_message = "assignment is already published"


class SubmissionRevertError(InvalidStateError):
    default_message = "cannot change submitted assignment back to draft"


class AlreadySubmittedError(InvalidStateError):
    default_message = "assignment already submitted"


class AlreadyGradedError(InvalidStateError):
    default_message = "submission has already been graded"


class NotSubmittedYetError(InvalidStateError):
    default_message = "submission is not submitted yet"


class PublishedAssignmentLockedError(InvalidStateError):
    default_message = "cannot modify question in published assignment"


class AssignmentHasSubmissionsError(InvalidStateError):
    default_message = "cannot delete/unpublish assignment with submissions"


class DeadlineShortenedError(InvalidStateError):
    default_message = "cannot shorten deadline for published assignment"


# --- Deadline ---

class DeadlinePassedError(DeadlineExceededError):
    default_message = "assignment deadline has passed"


# --- Validation ---

class MissingCorrectAnswerError(InputValidationError):
    default_message = "question has no correct answer"


class MalformedAnswerError(InputValidationError):
    default_message = "answer is not in the expected format"


class UnknownQuestionError(InputValidationError):
    default_message = "question does not belong to this assignment"


class DuplicateClassCodeError(InputValidationError):
    default_message = "class code already exists"


class ScoreOutOfRangeError(InputValidationError):
    default_message = "score exceeds the question's maximum score"


class DuplicateQuestionOrderError(InputValidationError):
    default_message = "question order already used in this assignment"


class UnknownOptionKeyError(InputValidationError):
    default_message = "correct answer refers to an option key that does not exist"


class ClassHasAssignmentsError(InvalidStateError):
    default_message = "cannot delete class with assignments"


class DuplicateUserCodeError(InputValidationError):
    default_message = "user code already exists"
