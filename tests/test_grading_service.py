"""Tests for services/grading_service.py."""
import pytest

from coursework.models import Answer, Submission, SubmissionStatus
from coursework.schemas.grading import (
    BatchGradeItem,
    BatchGradeRequest,
    GradeAnswerRequest,
    GradeSubmissionRequest,
)
from coursework.utils.errors import (
    AssignmentNotFoundError,
    ErrorKind,
    NotSubmittedYetError,
    PermissionDeniedError,
    ScoreOutOfRangeError,
    SubmissionNotFoundError,
)
from tests.conftest import NOW, OTHER_TEACHER_ID, TEACHER_ID


def add_submission(repos, assignment, student_id, status=SubmissionStatus.SUBMITTED, answers=()):
    submission, _ = repos.submissions.create_if_absent(
        Submission(assignment_id=assignment.id, student_id=student_id, status=status, submitted_at=NOW)
    )
    for question_id, content, score in answers:
        repos.answers.create(Answer(submission_id=submission.id, question_id=question_id, content=content, score=score))
    return submission


def grade_request(*items, feedback=""):
    return GradeSubmissionRequest(
        answers=[GradeAnswerRequest(question_id=qid, score=score, feedback=fb) for qid, score, fb in items],
        overall_feedback=feedback,
    )


def test_grade_submission(grading_service, repos, published_assignment, questions, clock):
    submission = add_submission(
        repos, published_assignment, 100,
        answers=[(questions.single.id, "B", 10), (questions.essay.id, "proof", 0)],
    )

    detail = grading_service.grade_submission(
        submission.id,
        grade_request((questions.essay.id, 45, "Good structure"), feedback="Nice work"),
        TEACHER_ID,
    )

    assert detail.status == SubmissionStatus.GRADED
    assert detail.score == 55
    assert detail.graded_by == TEACHER_ID
    assert detail.graded_at == clock.now
    assert detail.feedback == "Nice work"
    essay = next(a for a in detail.answers if a.question_id == questions.essay.id)
    assert essay.score == 45
    assert essay.is_correct is True
    assert essay.feedback == "Good structure"


def test_grade_zero_marks_answer_incorrect(grading_service, repos, published_assignment, questions):
    submission = add_submission(repos, published_assignment, 100, answers=[(questions.essay.id, "?", 0)])
    detail = grading_service.grade_submission(submission.id, grade_request((questions.essay.id, 0, "")), TEACHER_ID)
    assert detail.answers[0].is_correct is False


def test_grade_skips_unanswered_questions(grading_service, repos, published_assignment, questions):
    submission = add_submission(repos, published_assignment, 100, answers=[(questions.single.id, "B", 10)])
    detail = grading_service.grade_submission(
        submission.id, grade_request((questions.essay.id, 30, "not answered")), TEACHER_ID
    )
    assert detail.score == 10
    assert len(detail.answers) == 1


def test_grade_draft_fails(grading_service, repos, published_assignment):
    submission = add_submission(repos, published_assignment, 100, status=SubmissionStatus.DRAFT)
    with pytest.raises(NotSubmittedYetError) as exc:
        grading_service.grade_submission(submission.id, grade_request(), TEACHER_ID)
    assert exc.value.kind == ErrorKind.INVALID_STATE


def test_regrade_is_rejected(grading_service, repos, published_assignment):
    submission = add_submission(repos, published_assignment, 100)
    grading_service.grade_submission(submission.id, grade_request(), TEACHER_ID)
    with pytest.raises(NotSubmittedYetError):
        grading_service.grade_submission(submission.id, grade_request(), TEACHER_ID)


def test_grade_missing_submission(grading_service):
    with pytest.raises(SubmissionNotFoundError) as exc:
        grading_service.grade_submission(404, grade_request(), TEACHER_ID)
    assert exc.value.kind == ErrorKind.NOT_FOUND


def test_grade_by_other_teacher(grading_service, repos, published_assignment, questions):
    submission = add_submission(repos, published_assignment, 100, answers=[(questions.essay.id, "x", 0)])
    with pytest.raises(PermissionDeniedError) as exc:
        grading_service.grade_submission(submission.id, grade_request((questions.essay.id, 60, "")), OTHER_TEACHER_ID)
    assert exc.value.kind == ErrorKind.PERMISSION_DENIED
    assert repos.submissions.get(submission.id).status == SubmissionStatus.SUBMITTED
    assert repos.answers.list_by_submission(submission.id)[0].score == 0


def test_batch_partial_failure(grading_service, repos, published_assignment, questions):
    first = add_submission(repos, published_assignment, 100, answers=[(questions.essay.id, "a", 0)])
    draft = add_submission(repos, published_assignment, 101, status=SubmissionStatus.DRAFT)
    third = add_submission(repos, published_assignment, 102, answers=[(questions.essay.id, "c", 0)])

    results = grading_service.batch_grade(
        BatchGradeRequest(
            submissions=[
                BatchGradeItem(submission_id=s.id, answers=[GradeAnswerRequest(question_id=questions.essay.id, score=50)])
                for s in (first, draft, third)
            ]
        ),
        TEACHER_ID,
    )

    assert [r.submission_id for r in results] == [first.id, draft.id, third.id]
    assert [r.success for r in results] == [True, False, True]
    assert results[1].error
    assert results[1].error_kind == ErrorKind.INVALID_STATE.value
    assert repos.submissions.get(first.id).status == SubmissionStatus.GRADED
    assert repos.submissions.get(third.id).score == 50
    assert repos.submissions.get(draft.id).status == SubmissionStatus.DRAFT


def test_batch_reports_missing_submission(grading_service, repos, published_assignment):
    results = grading_service.batch_grade(
        BatchGradeRequest(submissions=[BatchGradeItem(submission_id=999, answers=[])]), TEACHER_ID
    )
    assert results[0].success is False
    assert results[0].error_kind == ErrorKind.NOT_FOUND.value


def test_publish_grades(grading_service, repos, published_assignment, clock):
    assignment = grading_service.publish_grades(published_assignment.id, TEACHER_ID)
    assert assignment.grades_published is True
    assert assignment.grades_published_at == clock.now


def test_publish_grades_requires_owner(grading_service, published_assignment):
    with pytest.raises(PermissionDeniedError):
        grading_service.publish_grades(published_assignment.id, OTHER_TEACHER_ID)
    assert published_assignment.grades_published is False


def test_progress_math(grading_service, repos, published_assignment):
    for student_id in range(100, 106):
        add_submission(repos, published_assignment, student_id, status=SubmissionStatus.SUBMITTED)
    for student_id in range(200, 204):
        add_submission(repos, published_assignment, student_id, status=SubmissionStatus.GRADED)
    add_submission(repos, published_assignment, 300, status=SubmissionStatus.DRAFT)

    progress = grading_service.get_grading_progress(published_assignment.id, TEACHER_ID)
    assert progress.total_submissions == 10
    assert progress.graded_count == 4
    assert progress.ungraded_count == 6
    assert progress.grading_progress == 40.0
    assert progress.grades_published is False


def test_progress_with_no_submissions(grading_service, published_assignment):
    progress = grading_service.get_grading_progress(published_assignment.id, TEACHER_ID)
    assert progress.total_submissions == 0
    assert progress.grading_progress == 0.0


def test_progress_missing_assignment(grading_service):
    with pytest.raises(AssignmentNotFoundError):
        grading_service.get_grading_progress(5, TEACHER_ID)


def test_submissions_for_grading_status_filter(grading_service, repos, published_assignment):
    add_submission(repos, published_assignment, 100, status=SubmissionStatus.SUBMITTED)
    add_submission(repos, published_assignment, 101, status=SubmissionStatus.GRADED)
    add_submission(repos, published_assignment, 102, status=SubmissionStatus.DRAFT)

    everything = grading_service.get_submissions_for_grading(published_assignment.id, TEACHER_ID)
    assert everything.total == 3

    pending = grading_service.get_submissions_for_grading(
        published_assignment.id, TEACHER_ID, status=SubmissionStatus.SUBMITTED
    )
    assert pending.total == 1
    assert pending.items[0].student_id == 100


def test_grading_detail_pairs_questions_with_answers(grading_service, repos, published_assignment, questions):
    submission = add_submission(repos, published_assignment, 100, answers=[(questions.fill.id, "Paris", 5)])
    detail = grading_service.get_grading_detail(submission.id, TEACHER_ID)

    assert len(detail.questions) == 5
    paired = {item.question.id: item.answer for item in detail.questions}
    assert paired[questions.fill.id].content == "Paris"
    assert paired[questions.essay.id] is None
    # teachers see the answer key
    assert detail.questions[0].question.correct_answer == "B"


def test_grading_detail_requires_owner(grading_service, repos, published_assignment):
    submission = add_submission(repos, published_assignment, 100)
    with pytest.raises(PermissionDeniedError):
        grading_service.get_grading_detail(submission.id, OTHER_TEACHER_ID)


def test_submission_statistics(grading_service, repos, published_assignment):
    add_submission(repos, published_assignment, 100, status=SubmissionStatus.DRAFT)
    add_submission(repos, published_assignment, 101, status=SubmissionStatus.SUBMITTED)
    add_submission(repos, published_assignment, 102, status=SubmissionStatus.GRADED)
    add_submission(repos, published_assignment, 103, status=SubmissionStatus.GRADED)

    stats = grading_service.get_submission_statistics(published_assignment.id, TEACHER_ID)
    assert (stats.total_submissions, stats.draft_submissions, stats.submitted_submissions, stats.graded_submissions) == (
        4, 1, 1, 2,
    )


def test_grade_above_question_maximum_is_rejected(grading_service, repos, published_assignment, questions):
    submission = add_submission(
        repos, published_assignment, 100,
        answers=[(questions.single.id, "B", 10), (questions.essay.id, "proof", 0)],
    )

    with pytest.raises(ScoreOutOfRangeError) as exc:
        grading_service.grade_submission(
            submission.id,
            grade_request((questions.single.id, 10, ""), (questions.essay.id, 500, "")),
            TEACHER_ID,
        )

    assert exc.value.kind == ErrorKind.VALIDATION_ERROR
    assert repos.submissions.get(submission.id).status == SubmissionStatus.SUBMITTED
    essay = next(a for a in repos.answers.list_by_submission(submission.id) if a.question_id == questions.essay.id)
    assert essay.score == 0


def test_grade_at_question_maximum_is_allowed(grading_service, repos, published_assignment, questions):
    submission = add_submission(repos, published_assignment, 100, answers=[(questions.essay.id, "proof", 0)])
    detail = grading_service.grade_submission(submission.id, grade_request((questions.essay.id, 60, "")), TEACHER_ID)
    assert detail.score == 60


def test_batch_survives_storage_failure(grading_service, repos, published_assignment, questions):
    items = [
        add_submission(repos, published_assignment, student_id, answers=[(questions.essay.id, "text", 0)])
        for student_id in (100, 101, 102)
    ]
    repos.answers.failing_submissions.add(items[1].id)

    results = grading_service.batch_grade(
        BatchGradeRequest(
            submissions=[
                BatchGradeItem(submission_id=s.id, answers=[GradeAnswerRequest(question_id=questions.essay.id, score=40)])
                for s in items
            ]
        ),
        TEACHER_ID,
    )

    assert [r.success for r in results] == [True, False, True]
    assert "database is locked" in results[1].error
    assert results[1].error_kind is None
    assert repos.answers.rollbacks == 1
    assert repos.submissions.rollbacks == 1
    assert repos.submissions.get(items[0].id).status == SubmissionStatus.GRADED
    assert repos.submissions.get(items[2].id).score == 40
    assert repos.submissions.get(items[1].id).status == SubmissionStatus.SUBMITTED
