import logging
from datetime import datetime
from typing import Callable, List, Optional

from coursework.models import Assignment, Submission, SubmissionStatus
from coursework.repositories.ports import (
    IAnswerRepository,
    IAssignmentRepository,
    IQuestionRepository,
    ISubmissionRepository,
)
from coursework.schemas.grading import (
    BatchGradeRequest,
    BatchGradeResult,
    GradeSubmissionRequest,
    GradingDetail,
    GradingProgress,
    QuestionWithAnswer,
    SubmissionListForGrading,
    SubmissionStatistics,
)
from coursework.schemas.question import QuestionRead
from coursework.schemas.submission import AnswerRead, SubmissionDetail, SubmissionRead
from coursework.utils.errors import (
    AssignmentNotFoundError,
    CourseworkError,
    NotSubmittedYetError,
    PermissionDeniedError,
    ScoreOutOfRangeError,
    SubmissionNotFoundError,
)
from coursework.utils.time import get_current_time

logger = logging.getLogger(__name__)


class GradingService:
    """Teacher-driven grading: submitted -> graded, batches, publication and progress."""

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

    def _owned_assignment(self, assignment_id: int, teacher_id: int) -> Assignment:
        assignment = self.assignments.get(assignment_id)
        if not assignment:
            raise AssignmentNotFoundError()
        if assignment.teacher_id != teacher_id:
            logger.warning(f"Teacher {teacher_id} denied access to grading of assignment {assignment_id}")
            raise PermissionDeniedError("teacher has no permission to grade this assignment")
        return assignment

    def _detail(self, submission: Submission) -> SubmissionDetail:
        answers = self.answers.list_by_submission(submission.id)
        return SubmissionDetail(
            **SubmissionRead.model_validate(submission).model_dump(),
            answers=[AnswerRead.model_validate(a) for a in answers],
        )

    def grade_submission(self, submission_id: int, request: GradeSubmissionRequest, teacher_id: int) -> SubmissionDetail:
        submission = self.submissions.get(submission_id)
        if submission is None:
            raise SubmissionNotFoundError()
        # A graded submission fails here too: re-grading is not offered.
        if submission.status != SubmissionStatus.SUBMITTED:
            raise NotSubmittedYetError()
        self._owned_assignment(submission.assignment_id, teacher_id)

        now = self.clock()
        answers = {a.question_id: a for a in self.answers.list_by_submission(submission_id)}
        max_scores = {q.id: q.score for q in self.questions.list_by_assignment(submission.assignment_id)}
        for item in request.answers:
            limit = max_scores.get(item.question_id)
            if item.question_id in answers and limit is not None and item.score > limit:
                raise ScoreOutOfRangeError(
                    f"score {item.score} for question {item.question_id} exceeds its maximum of {limit}"
                )

        for item in request.answers:
            answer = answers.get(item.question_id)
            if answer is None:
                continue
            answer.score = item.score
            answer.feedback = item.feedback
            answer.is_correct = item.score > 0
            answer.graded_at = now
            self.answers.update(answer)

        submission.score = sum(a.score for a in answers.values())
        submission.status = SubmissionStatus.GRADED
        submission.graded_at = now
        submission.graded_by = teacher_id
        submission.feedback = request.overall_feedback
        submission = self.submissions.update(submission)

        logger.info(f"Teacher {teacher_id} graded submission {submission_id}: score {submission.score}")
        return self._detail(submission)

    def batch_grade(self, request: BatchGradeRequest, teacher_id: int) -> List[BatchGradeResult]:
        results = []
        for item in request.submissions:
            try:
                self.grade_submission(
                    item.submission_id,
                    GradeSubmissionRequest(answers=item.answers, overall_feedback=item.overall_feedback),
                    teacher_id,
                )
            except CourseworkError as e:
                results.append(
                    BatchGradeResult(
                        submission_id=item.submission_id,
                        success=False,
                        error=e.message,
                        error_kind=e.kind.value,
                    )
                )
                continue
            except Exception as e:
                logger.error(f"Batch grading of submission {item.submission_id} failed: {e}", exc_info=True)
                self.submissions.rollback()
                self.answers.rollback()
                results.append(BatchGradeResult(submission_id=item.submission_id, success=False, error=str(e)))
                continue
            results.append(BatchGradeResult(submission_id=item.submission_id, success=True))

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Batch grading by teacher {teacher_id}: {succeeded}/{len(results)} succeeded")
        return results

    def publish_grades(self, assignment_id: int, teacher_id: int) -> Assignment:
        assignment = self._owned_assignment(assignment_id, teacher_id)
        assignment.grades_published = True
        assignment.grades_published_at = self.clock()
        assignment = self.assignments.update(assignment)
        logger.info(f"Grades published for assignment {assignment_id}")
        return assignment

    def get_grading_progress(self, assignment_id: int, teacher_id: int) -> GradingProgress:
        assignment = self._owned_assignment(assignment_id, teacher_id)
        counts = self.submissions.count_by_status(assignment_id)
        graded = counts[SubmissionStatus.GRADED]
        ungraded = counts[SubmissionStatus.SUBMITTED]
        total = graded + ungraded
        return GradingProgress(
            assignment_id=assignment_id,
            total_submissions=total,
            graded_count=graded,
            ungraded_count=ungraded,
            grading_progress=graded * 100 / total if total else 0.0,
            grades_published=assignment.grades_published,
        )

    def get_submissions_for_grading(
        self,
        assignment_id: int,
        teacher_id: int,
        page: int = 1,
        page_size: int = 20,
        status: Optional[SubmissionStatus] = None,
    ) -> SubmissionListForGrading:
        self._owned_assignment(assignment_id, teacher_id)
        submissions, total = self.submissions.list_by_assignment(
            assignment_id, status=status, offset=(page - 1) * page_size, limit=page_size
        )
        return SubmissionListForGrading(
            items=[SubmissionRead.model_validate(s) for s in submissions],
            total=total,
            page=page,
            page_size=page_size,
        )

    def get_grading_detail(self, submission_id: int, teacher_id: int) -> GradingDetail:
        submission = self.submissions.get(submission_id)
        if submission is None:
            raise SubmissionNotFoundError()
        self._owned_assignment(submission.assignment_id, teacher_id)

        detail = self._detail(submission)
        by_question = {a.question_id: a for a in detail.answers}
        return GradingDetail(
            submission=detail,
            questions=[
                QuestionWithAnswer(question=QuestionRead.model_validate(q), answer=by_question.get(q.id))
                for q in self.questions.list_by_assignment(submission.assignment_id)
            ],
        )

    def get_submission_statistics(self, assignment_id: int, teacher_id: int) -> SubmissionStatistics:
        self._owned_assignment(assignment_id, teacher_id)
        counts = self.submissions.count_by_status(assignment_id)
        return SubmissionStatistics(
            total_submissions=sum(counts.values()),
            draft_submissions=counts[SubmissionStatus.DRAFT],
            submitted_submissions=counts[SubmissionStatus.SUBMITTED],
            graded_submissions=counts[SubmissionStatus.GRADED],
        )
