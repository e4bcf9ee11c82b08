"""Tests for services/assignment_service.py."""
from datetime import datetime, timedelta, timezone

import pytest

from coursework.models import AssignmentStatus, QuestionType, Submission, SubmissionStatus
from coursework.schemas.assignment import AssignmentCreate, AssignmentUpdate
from coursework.schemas.question import QuestionCreate, QuestionOption
from coursework.utils.errors import (
    AlreadyPublishedError,
    AssignmentHasSubmissionsError,
    AssignmentNotFoundError,
    ClassNotFoundError,
    DeadlineShortenedError,
    DuplicateQuestionOrderError,
    MissingCorrectAnswerError,
    PermissionDeniedError,
)
from tests.conftest import NOW, OTHER_TEACHER_ID, TEACHER_ID


def create_request(class_id, **overrides):
    data = dict(
        title="Fractions",
        class_id=class_id,
        deadline=NOW + timedelta(days=7),
        questions=[
            QuestionCreate(
                type=QuestionType.CHOICE, content="1/2 + 1/4?", score=10, order=1,
                options=[QuestionOption(key="A", value="3/4"), QuestionOption(key="B", value="2/6")],
                correct_answer="A",
            ),
            QuestionCreate(type=QuestionType.ESSAY, content="Explain", score=90, order=2),
        ],
    )
    data.update(overrides)
    return AssignmentCreate(**data)


def add_submission(repos, assignment, student_id, status, score=0):
    submission, _ = repos.submissions.create_if_absent(
        Submission(assignment_id=assignment.id, student_id=student_id, status=status, score=score)
    )
    return submission


def test_create_assignment_with_questions(assignment_service, course_class):
    detail = assignment_service.create_assignment(create_request(course_class.id), TEACHER_ID)
    assert detail.status == AssignmentStatus.DRAFT
    assert detail.published_at is None
    assert [q.order for q in detail.questions] == [1, 2]
    assert detail.questions[0].option_list[0].value == "3/4"
    assert detail.statistics.submitted_count == 0


def test_create_published_sets_published_at(assignment_service, course_class, clock):
    detail = assignment_service.create_assignment(create_request(course_class.id, status="published"), TEACHER_ID)
    assert detail.status == AssignmentStatus.PUBLISHED
    assert detail.published_at == clock.now


def test_create_converts_aware_deadline_to_utc(assignment_service, repos, course_class):
    deadline = datetime(2024, 3, 10, 20, 0, tzinfo=timezone(timedelta(hours=8)))
    detail = assignment_service.create_assignment(create_request(course_class.id, deadline=deadline), TEACHER_ID)
    assert repos.assignments.get(detail.id).deadline == datetime(2024, 3, 10, 12, 0)


def test_create_in_foreign_or_missing_class(assignment_service, course_class):
    with pytest.raises(PermissionDeniedError):
        assignment_service.create_assignment(create_request(course_class.id), OTHER_TEACHER_ID)
    with pytest.raises(ClassNotFoundError):
        assignment_service.create_assignment(create_request(999), TEACHER_ID)


def test_create_with_bad_question_writes_nothing(assignment_service, repos, course_class):
    bad = QuestionCreate(type=QuestionType.TRUE_FALSE, content="?", score=5, order=3)
    with pytest.raises(MissingCorrectAnswerError):
        assignment_service.create_assignment(
            create_request(course_class.id, questions=create_request(course_class.id).questions + [bad]), TEACHER_ID
        )
    assert not repos.assignments.rows
    assert not repos.questions.rows


def test_create_with_duplicate_question_order_writes_nothing(assignment_service, repos, course_class):
    clash = QuestionCreate(type=QuestionType.ESSAY, content="Again", score=5, order=1)
    with pytest.raises(DuplicateQuestionOrderError):
        assignment_service.create_assignment(
            create_request(course_class.id, questions=create_request(course_class.id).questions + [clash]), TEACHER_ID
        )
    assert not repos.assignments.rows
    assert not repos.questions.rows


def test_published_deadline_may_only_be_extended(assignment_service, published_assignment):
    old_deadline = published_assignment.deadline
    with pytest.raises(DeadlineShortenedError):
        assignment_service.update_assignment(
            published_assignment.id, AssignmentUpdate(deadline=old_deadline - timedelta(hours=1)), TEACHER_ID
        )
    assert published_assignment.deadline == old_deadline

    updated = assignment_service.update_assignment(
        published_assignment.id, AssignmentUpdate(deadline=old_deadline + timedelta(days=2)), TEACHER_ID
    )
    assert updated.deadline == old_deadline + timedelta(days=2)


def test_draft_deadline_may_be_shortened(assignment_service, repos, published_assignment):
    published_assignment.status = AssignmentStatus.DRAFT
    earlier = published_assignment.deadline - timedelta(hours=12)
    updated = assignment_service.update_assignment(published_assignment.id, AssignmentUpdate(deadline=earlier), TEACHER_ID)
    assert updated.deadline == earlier


def test_update_by_other_teacher(assignment_service, published_assignment):
    with pytest.raises(PermissionDeniedError):
        assignment_service.update_assignment(published_assignment.id, AssignmentUpdate(title="x"), OTHER_TEACHER_ID)


def test_update_back_to_draft_is_guarded(assignment_service, repos, published_assignment):
    add_submission(repos, published_assignment, 100, SubmissionStatus.SUBMITTED)
    with pytest.raises(AssignmentHasSubmissionsError):
        assignment_service.update_assignment(
            published_assignment.id, AssignmentUpdate(status=AssignmentStatus.DRAFT), TEACHER_ID
        )
    assert published_assignment.status == AssignmentStatus.PUBLISHED


def test_closed_detour_back_to_draft_is_guarded(assignment_service, repos, published_assignment):
    add_submission(repos, published_assignment, 100, SubmissionStatus.GRADED, score=40)
    closed = assignment_service.update_assignment(
        published_assignment.id, AssignmentUpdate(status=AssignmentStatus.CLOSED), TEACHER_ID
    )
    assert closed.status == AssignmentStatus.CLOSED

    with pytest.raises(AssignmentHasSubmissionsError):
        assignment_service.update_assignment(
            published_assignment.id, AssignmentUpdate(status=AssignmentStatus.DRAFT), TEACHER_ID
        )
    assert published_assignment.status == AssignmentStatus.CLOSED


def test_closed_assignment_without_work_may_return_to_draft(assignment_service, published_assignment):
    published_assignment.status = AssignmentStatus.CLOSED
    reopened = assignment_service.update_assignment(
        published_assignment.id, AssignmentUpdate(status=AssignmentStatus.DRAFT), TEACHER_ID
    )
    assert reopened.status == AssignmentStatus.DRAFT
    assert reopened.published_at is None


def test_publish_and_unpublish(assignment_service, published_assignment, clock):
    unpublished = assignment_service.unpublish_assignment(published_assignment.id, TEACHER_ID)
    assert unpublished.status == AssignmentStatus.DRAFT
    assert unpublished.published_at is None

    clock.advance(hours=2)
    published = assignment_service.publish_assignment(published_assignment.id, TEACHER_ID)
    assert published.status == AssignmentStatus.PUBLISHED
    assert published.published_at == clock.now

    with pytest.raises(AlreadyPublishedError):
        assignment_service.publish_assignment(published_assignment.id, TEACHER_ID)


def test_unpublish_allowed_with_only_drafts(assignment_service, repos, published_assignment):
    add_submission(repos, published_assignment, 100, SubmissionStatus.DRAFT)
    assert assignment_service.unpublish_assignment(published_assignment.id, TEACHER_ID).status == AssignmentStatus.DRAFT


@pytest.mark.parametrize("status", [SubmissionStatus.SUBMITTED, SubmissionStatus.GRADED])
def test_delete_and_unpublish_blocked_by_handed_in_work(assignment_service, repos, published_assignment, status):
    add_submission(repos, published_assignment, 100, status)
    with pytest.raises(AssignmentHasSubmissionsError):
        assignment_service.delete_assignment(published_assignment.id, TEACHER_ID)
    with pytest.raises(AssignmentHasSubmissionsError):
        assignment_service.unpublish_assignment(published_assignment.id, TEACHER_ID)
    assert repos.assignments.get(published_assignment.id) is not None


def test_delete_removes_questions_and_drafts(assignment_service, repos, published_assignment, questions):
    add_submission(repos, published_assignment, 100, SubmissionStatus.DRAFT)
    assignment_service.delete_assignment(published_assignment.id, TEACHER_ID)
    assert repos.assignments.get(published_assignment.id) is None
    assert not repos.questions.rows
    assert not repos.submissions.rows
    with pytest.raises(AssignmentNotFoundError):
        assignment_service.delete_assignment(published_assignment.id, TEACHER_ID)


def test_statistics(assignment_service, repos, published_assignment):
    add_submission(repos, published_assignment, 100, SubmissionStatus.DRAFT)
    add_submission(repos, published_assignment, 101, SubmissionStatus.SUBMITTED, score=30)
    add_submission(repos, published_assignment, 102, SubmissionStatus.GRADED, score=80)
    add_submission(repos, published_assignment, 103, SubmissionStatus.GRADED, score=65)

    stats = assignment_service.get_assignment_statistics(published_assignment.id, TEACHER_ID)
    assert stats.submitted_count == 3
    assert stats.graded_count == 2
    assert stats.average_score == 72.5
    assert (stats.max_score, stats.min_score) == (80, 65)


def test_list_teacher_assignments(assignment_service, course_class):
    for title in ("One", "Two", "Three"):
        assignment_service.create_assignment(create_request(course_class.id, title=title, questions=[]), TEACHER_ID)

    page = assignment_service.list_teacher_assignments(TEACHER_ID, page=1, page_size=2)
    assert page.total == 3
    assert [item.title for item in page.items] == ["Three", "Two"]
    assert assignment_service.list_teacher_assignments(OTHER_TEACHER_ID).total == 0
