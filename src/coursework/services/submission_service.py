import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from coursework.models import Answer, Assignment, Submission, SubmissionStatus
from coursework.repositories.ports import (
    IAnswerRepository,
    IAssignmentRepository,
    IQuestionRepository,
    ISubmissionRepository,
)
from coursework.schemas.assignment import AssignmentRead
from coursework.schemas.submission import (
    StudentAnswerView,
    StudentAssignmentView,
    StudentSubmissionList,
    StudentSubmissionView,
    SubmissionRequest,
)
from coursework.services.question_service import to_student_view
from coursework.services.question_validator import validate
from coursework.utils.errors import (
    AlreadyGradedError,
    AlreadySubmittedError,
    AssignmentNotFoundError,
    AssignmentNotPublishedError,
    CourseworkError,
    DeadlinePassedError,
    MalformedAnswerError,
    MissingCorrectAnswerError,
    PermissionDeniedError,
    SubmissionNotFoundError,
    SubmissionRevertError,
    UnknownQuestionError,
)
from coursework.utils.time import get_current_time

logger = logging.getLogger(__name__)


class SubmissionService:
    """
    Student-side submission lifecycle.

    A submission moves draft -> submitted -> graded. Students drive the first
    transition through ``create_or_update_submission`` or ``submit_assignment``;
    only the grading workflow moves it to graded. Objective answers are scored
    automatically on submit, as a best-effort step that never fails the save.
    """

    def __init__(
        self,
        assignments: IAssignmentRepository,
        questions: IQuestionRepository,
        submissions: ISubmissionRepository,
        answers: IAnswerRepository,
        clock: Callable[[], datetime] = get_current_time,
    ):
        self.assignments = assignments
        self.questions = questions
        self.submissions = submissions
        self.answers = answers
        self.clock = clock

    def _published_assignment(self, assignment_id: int) -> Assignment:
        assignment = self.assignments.get(assignment_id)
        if not assignment:
            raise AssignmentNotFoundError()
        if not assignment.is_published:
            raise AssignmentNotPublishedError()
        return assignment

    def create_or_update_submission(self, request: SubmissionRequest, student_id: int) -> Submission:
        assignment = self._published_assignment(request.assignment_id)
        requested = SubmissionStatus(request.status)
        now = self.clock()

        if requested == SubmissionStatus.SUBMITTED and assignment.is_overdue(now):
            logger.warning(f"Student {student_id} submitted assignment {assignment.id} after the deadline")
            raise DeadlinePassedError()

        question_ids = {q.id for q in self.questions.list_by_assignment(assignment.id)}
        for answer in request.answers:
            if answer.question_id not in question_ids:
                raise UnknownQuestionError(
                    f"question {answer.question_id} does not belong to assignment {assignment.id}"
                )

        submission = self.submissions.get_by_assignment_and_student(assignment.id, student_id)
        created = False
        if submission is None:
            submission, created = self.submissions.create_if_absent(
                Submission(
                    assignment_id=assignment.id,
                    student_id=student_id,
                    status=requested,
                    submitted_at=now if requested == SubmissionStatus.SUBMITTED else None,
                )
            )

        if not created:
            if submission.is_graded:
                raise AlreadyGradedError()
            if submission.status == SubmissionStatus.SUBMITTED and requested == SubmissionStatus.DRAFT:
                logger.warning(f"Student {student_id} tried to revert submission {submission.id} to draft")
                raise SubmissionRevertError()
            submission.status = requested
            if requested == SubmissionStatus.SUBMITTED and submission.submitted_at is None:
                submission.submitted_at = now
            submission = self.submissions.update(submission)

        self._merge_answers(submission.id, request)
        logger.info(
            f"Student {student_id} saved submission {submission.id} for assignment {assignment.id} "
            f"as {submission.status.value} ({len(request.answers)} answers)"
        )

        if submission.status == SubmissionStatus.SUBMITTED:
            self._auto_grade_best_effort(submission.id)
            submission = self.submissions.get(submission.id) or submission
        return submission

    def _merge_answers(self, submission_id: int, request: SubmissionRequest) -> None:
        """Overwrite answers for the questions in the request; others stay as they are."""
        existing: Dict[int, Answer] = {a.question_id: a for a in self.answers.list_by_submission(submission_id)}
        for item in request.answers:
            answer = existing.get(item.question_id)
            if answer is not None:
                answer.content = item.content
                self.answers.update(answer)
            else:
                self.answers.create(
                    Answer(submission_id=submission_id, question_id=item.question_id, content=item.content)
                )

    def submit_assignment(self, assignment_id: int, student_id: int) -> Submission:
        submission = self.submissions.get_by_assignment_and_student(assignment_id, student_id)
        if submission is None:
            raise SubmissionNotFoundError()
        if submission.is_submitted:
            raise AlreadySubmittedError()

        assignment = self._published_assignment(assignment_id)
        now = self.clock()
        if assignment.is_overdue(now):
            logger.warning(f"Student {student_id} submitted assignment {assignment_id} after the deadline")
            raise DeadlinePassedError()

        submission.status = SubmissionStatus.SUBMITTED
        submission.submitted_at = now
        submission = self.submissions.update(submission)
        logger.info(f"Student {student_id} submitted assignment {assignment_id} (submission {submission.id})")

        self._auto_grade_best_effort(submission.id)
        return self.submissions.get(submission.id) or submission

    def _auto_grade_best_effort(self, submission_id: int) -> None:
        try:
            self.auto_grade_submission(submission_id)
        except CourseworkError as e:
            logger.warning(f"Auto-grading submission {submission_id} failed: {e.message}")
        except Exception as e:
            logger.error(f"Auto-grading submission {submission_id} failed: {e}", exc_info=True)
            self.submissions.rollback()
            self.answers.rollback()

    def auto_grade_submission(self, submission_id: int) -> Submission:
        """
        Score every objective answer of a submission and recompute its total.

        Essay answers keep whatever score they have. Running this again gives
        the same result, and a graded submission is left alone.
        """
        submission = self.submissions.get(submission_id)
        if submission is None:
            raise SubmissionNotFoundError()
        if submission.is_graded:
            return submission

        questions = {q.id: q for q in self.questions.list_by_assignment(submission.assignment_id)}
        answers = self.answers.list_by_submission(submission_id)
        now = self.clock()

        for answer in answers:
            question = questions.get(answer.question_id)
            if question is None or not question.is_objective:
                continue
            try:
                is_correct, score = validate(question, answer.content)
            except MalformedAnswerError as e:
                logger.info(f"Answer {answer.id} (question {question.id}) is malformed, scored 0: {e.message}")
                is_correct, score = False, 0
            except MissingCorrectAnswerError as e:
                # Nothing to compare against; drop any score left from an earlier run.
                logger.warning(f"Skipping answer {answer.id} (question {question.id}): {e.message}")
                answer.is_correct = None
                answer.score = 0
                answer.graded_at = None
                self.answers.update(answer)
                continue
            answer.is_correct = is_correct
            answer.score = score
            answer.graded_at = now
            self.answers.update(answer)

        submission.score = sum(a.score for a in answers)
        submission = self.submissions.update(submission)
        logger.info(f"Auto-graded submission {submission_id}: score {submission.score}")
        return submission

    # --- Student views ---

    def student_view(self, submission: Submission, assignment: Optional[Assignment] = None) -> StudentSubmissionView:
        """Submission as its student sees it; scores and feedback stay hidden until grades are published."""
        assignment = assignment or self.assignments.get(submission.assignment_id)
        visible = bool(assignment and assignment.grades_published and submission.is_graded)
        answers = self.answers.list_by_submission(submission.id)
        return StudentSubmissionView(
            id=submission.id,
            status=submission.status,
            submitted_at=submission.submitted_at,
            score=submission.score if visible else None,
            feedback=submission.feedback if visible else None,
            answers=[
                StudentAnswerView(
                    question_id=a.question_id,
                    content=a.content,
                    score=a.score if visible else None,
                    is_correct=a.is_correct if visible else None,
                    feedback=a.feedback if visible else None,
                )
                for a in answers
            ],
        )

    def get_submission(self, submission_id: int, student_id: int) -> StudentSubmissionView:
        submission = self.submissions.get(submission_id)
        if submission is None:
            raise SubmissionNotFoundError()
        if submission.student_id != student_id:
            raise PermissionDeniedError("submission belongs to another student")
        return self.student_view(submission)

    def list_student_submissions(self, student_id: int, page: int = 1, page_size: int = 20) -> StudentSubmissionList:
        submissions, total = self.submissions.list_by_student(
            student_id, offset=(page - 1) * page_size, limit=page_size
        )
        items: List[StudentSubmissionView] = [self.student_view(s) for s in submissions]
        return StudentSubmissionList(items=items, total=total, page=page, page_size=page_size)

    def get_student_assignment_view(self, assignment_id: int, student_id: int) -> StudentAssignmentView:
        assignment = self._published_assignment(assignment_id)
        submission = self.submissions.get_by_assignment_and_student(assignment_id, student_id)
        return StudentAssignmentView(
            assignment=AssignmentRead.model_validate(assignment),
            submission=self.student_view(submission, assignment) if submission else None,
            questions=[to_student_view(q) for q in self.questions.list_by_assignment(assignment_id)],
        )
