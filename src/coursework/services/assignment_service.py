import logging
from datetime import datetime
from typing import Callable, Optional

from coursework.models import Assignment, AssignmentStatus, SubmissionStatus
from coursework.repositories.ports import (
    IAnswerRepository,
    IAssignmentRepository,
    IClassRepository,
    IQuestionRepository,
    ISubmissionRepository,
)
from coursework.schemas.assignment import (
    AssignmentCreate,
    AssignmentDetail,
    AssignmentList,
    AssignmentListItem,
    AssignmentStatistics,
    AssignmentUpdate,
)
from coursework.services.question_service import build_question, to_question_detail
from coursework.utils.errors import (
    AlreadyPublishedError,
    AssignmentHasSubmissionsError,
    AssignmentNotFoundError,
    ClassNotFoundError,
    DeadlineShortenedError,
    DuplicateQuestionOrderError,
    PermissionDeniedError,
)
from coursework.utils.time import get_current_time, to_naive_utc

logger = logging.getLogger(__name__)


class AssignmentService:
    """
    Teacher-side assignment lifecycle: draft -> published (-> closed).

    Publication is what makes an assignment visible to students, so every
    change that could move the scoring surface under a student who already
    handed work in is refused once such work exists.
    """

    def __init__(
        self,
        assignments: IAssignmentRepository,
        questions: IQuestionRepository,
        submissions: ISubmissionRepository,
        answers: IAnswerRepository,
        classes: IClassRepository,
        clock: Callable[[], datetime] = get_current_time,
    ):
        self.assignments = assignments
        self.questions = questions
        self.submissions = submissions
        self.answers = answers
        self.classes = classes
        self.clock = clock

    def _get_owned(self, assignment_id: int, teacher_id: int, action: str) -> Assignment:
        assignment = self.assignments.get(assignment_id)
        if not assignment:
            raise AssignmentNotFoundError()
        if assignment.teacher_id != teacher_id:
            logger.warning(f"Teacher {teacher_id} tried to {action} assignment {assignment_id} owned by {assignment.teacher_id}")
            raise PermissionDeniedError(f"teacher has no permission to {action} this assignment")
        return assignment

    def _has_handed_in_work(self, assignment_id: int) -> bool:
        counts = self.submissions.count_by_status(assignment_id)
        return counts[SubmissionStatus.SUBMITTED] + counts[SubmissionStatus.GRADED] > 0

    def create_assignment(self, request: AssignmentCreate, teacher_id: int) -> AssignmentDetail:
        course_class = self.classes.get(request.class_id)
        if not course_class:
            raise ClassNotFoundError()
        if course_class.teacher_id != teacher_id:
            raise PermissionDeniedError("teacher has no permission to create assignment for this class")

        # Build every question first so a bad one rejects the whole request.
        pending = [build_question(0, q) for q in request.questions]
        orders = [q.order for q in pending]
        if len(set(orders)) != len(orders):
            raise DuplicateQuestionOrderError("two questions share the same order")

        status = AssignmentStatus(request.status)
        assignment = Assignment(
            title=request.title,
            description=request.description,
            class_id=request.class_id,
            teacher_id=teacher_id,
            deadline=to_naive_utc(request.deadline),
            total_score=request.total_score,
            status=status,
            published_at=self.clock() if status == AssignmentStatus.PUBLISHED else None,
        )
        assignment = self.assignments.create(assignment)

        for question in pending:
            question.assignment_id = assignment.id
            self.questions.create(question)

        logger.info(
            f"Teacher {teacher_id} created assignment {assignment.id} "
            f"({status.value}, {len(pending)} questions) in class {request.class_id}"
        )
        return self._detail(assignment)

    def update_assignment(self, assignment_id: int, request: AssignmentUpdate, teacher_id: int) -> Assignment:
        assignment = self._get_owned(assignment_id, teacher_id, "update")

        deadline = to_naive_utc(request.deadline)
        if assignment.is_published and deadline is not None and deadline < assignment.deadline:
            raise DeadlineShortenedError()
        status_changed = request.status is not None and request.status != assignment.status
        # Any way back to draft, closed included, reopens the questions for editing.
        if status_changed and request.status == AssignmentStatus.DRAFT and self._has_handed_in_work(assignment_id):
            raise AssignmentHasSubmissionsError()

        if request.title:
            assignment.title = request.title
        if request.description:
            assignment.description = request.description
        if deadline is not None:
            assignment.deadline = deadline
        if request.total_score:
            assignment.total_score = request.total_score
        if status_changed:
            if request.status == AssignmentStatus.DRAFT:
                assignment.published_at = None
            if request.status == AssignmentStatus.PUBLISHED and assignment.published_at is None:
                assignment.published_at = self.clock()
            assignment.status = request.status

        assignment = self.assignments.update(assignment)
        logger.info(f"Assignment {assignment_id} updated by teacher {teacher_id}")
        return assignment

    def delete_assignment(self, assignment_id: int, teacher_id: int) -> None:
        self._get_owned(assignment_id, teacher_id, "delete")
        if self._has_handed_in_work(assignment_id):
            raise AssignmentHasSubmissionsError()

        drafts, _ = self.submissions.list_by_assignment(assignment_id)
        for submission in drafts:
            self.answers.delete_by_submission(submission.id)
        self.submissions.delete_by_assignment(assignment_id)
        self.questions.delete_by_assignment(assignment_id)
        self.assignments.delete(assignment_id)
        logger.info(f"Assignment {assignment_id} deleted ({len(drafts)} draft submissions discarded)")

    def publish_assignment(self, assignment_id: int, teacher_id: int) -> Assignment:
        assignment = self._get_owned(assignment_id, teacher_id, "publish")
        if assignment.is_published:
            raise AlreadyPublishedError()
        assignment.status = AssignmentStatus.PUBLISHED
        assignment.published_at = self.clock()
        assignment = self.assignments.update(assignment)
        logger.info(f"Assignment {assignment_id} published")
        return assignment

    def unpublish_assignment(self, assignment_id: int, teacher_id: int) -> Assignment:
        assignment = self._get_owned(assignment_id, teacher_id, "unpublish")
        if self._has_handed_in_work(assignment_id):
            raise AssignmentHasSubmissionsError()
        assignment.status = AssignmentStatus.DRAFT
        assignment.published_at = None
        assignment = self.assignments.update(assignment)
        logger.info(f"Assignment {assignment_id} moved back to draft")
        return assignment

    def get_assignment_detail(self, assignment_id: int, teacher_id: int) -> AssignmentDetail:
        return self._detail(self._get_owned(assignment_id, teacher_id, "view"))

    def _detail(self, assignment: Assignment) -> AssignmentDetail:
        questions = self.questions.list_by_assignment(assignment.id)
        return AssignmentDetail(
            **assignment.model_dump(),
            questions=[to_question_detail(q) for q in questions],
            statistics=self._statistics(assignment.id),
        )

    def list_teacher_assignments(
        self,
        teacher_id: int,
        page: int = 1,
        page_size: int = 20,
        class_id: Optional[int] = None,
        status: Optional[AssignmentStatus] = None,
    ) -> AssignmentList:
        assignments, total = self.assignments.list(
            teacher_id=teacher_id,
            class_id=class_id,
            status=status,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        items = []
        for assignment in assignments:
            counts = self.submissions.count_by_status(assignment.id)
            items.append(
                AssignmentListItem(
                    id=assignment.id,
                    title=assignment.title,
                    class_id=assignment.class_id,
                    deadline=assignment.deadline,
                    total_score=assignment.total_score,
                    status=assignment.status,
                    created_at=assignment.created_at,
                    published_at=assignment.published_at,
                    submitted_count=counts[SubmissionStatus.SUBMITTED] + counts[SubmissionStatus.GRADED],
                    graded_count=counts[SubmissionStatus.GRADED],
                )
            )
        return AssignmentList(items=items, total=total, page=page, page_size=page_size)

    def get_assignment_statistics(self, assignment_id: int, teacher_id: int) -> AssignmentStatistics:
        self._get_owned(assignment_id, teacher_id, "view statistics for")
        return self._statistics(assignment_id)

    def _statistics(self, assignment_id: int) -> AssignmentStatistics:
        submissions, _ = self.submissions.list_by_assignment(assignment_id)
        handed_in = [s for s in submissions if s.is_submitted]
        graded_scores = [s.score for s in handed_in if s.is_graded]
        if not graded_scores:
            return AssignmentStatistics(submitted_count=len(handed_in))
        return AssignmentStatistics(
            submitted_count=len(handed_in),
            graded_count=len(graded_scores),
            average_score=round(sum(graded_scores) / len(graded_scores), 2),
            max_score=max(graded_scores),
            min_score=min(graded_scores),
        )
