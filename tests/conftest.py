"""Shared test fixtures for the coursework service."""
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import coursework.models  # noqa: F401
from coursework.models import (
    Assignment,
    AssignmentStatus,
    CourseClass,
    Question,
    QuestionType,
)
from coursework.services import AssignmentService, GradingService, QuestionService, SubmissionService
from tests.fakes import (
    FakeAnswerRepository,
    FakeAssignmentRepository,
    FakeClassRepository,
    FakeQuestionRepository,
    FakeSubmissionRepository,
)

TEACHER_ID = 1
OTHER_TEACHER_ID = 2
STUDENT_ID = 10
OTHER_STUDENT_ID = 11

NOW = datetime(2024, 3, 1, 12, 0, 0)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def repos():
    return SimpleNamespace(
        classes=FakeClassRepository(),
        assignments=FakeAssignmentRepository(),
        questions=FakeQuestionRepository(),
        submissions=FakeSubmissionRepository(),
        answers=FakeAnswerRepository(),
    )


@pytest.fixture
def submission_service(repos, clock):
    return SubmissionService(repos.assignments, repos.questions, repos.submissions, repos.answers, clock=clock)


@pytest.fixture
def grading_service(repos, clock):
    return GradingService(repos.assignments, repos.questions, repos.submissions, repos.answers, clock=clock)


@pytest.fixture
def question_service(repos):
    return QuestionService(repos.assignments, repos.questions)


@pytest.fixture
def assignment_service(repos, clock):
    return AssignmentService(
        repos.assignments, repos.questions, repos.submissions, repos.answers, repos.classes, clock=clock
    )


@pytest.fixture
def course_class(repos):
    return repos.classes.create(CourseClass(code="MATH-7A", name="Math 7A", teacher_id=TEACHER_ID))


@pytest.fixture
def published_assignment(repos, course_class):
    """Published assignment, deadline one day after NOW, with one question of each type."""
    assignment = repos.assignments.create(
        Assignment(
            title="Week 1",
            class_id=course_class.id,
            teacher_id=TEACHER_ID,
            deadline=NOW + timedelta(days=1),
            status=AssignmentStatus.PUBLISHED,
            published_at=NOW - timedelta(days=1),
        )
    )
    questions = [
        Question(
            assignment_id=assignment.id, type=QuestionType.CHOICE, content="2 + 2 = ?", score=10, order=1,
            options='[{"key": "A", "value": "3"}, {"key": "B", "value": "4"}]', correct_answer="B",
        ),
        Question(
            assignment_id=assignment.id, type=QuestionType.CHOICE, content="Primes?", score=20, order=2,
            options='[{"key": "A", "value": "2"}, {"key": "B", "value": "4"}, {"key": "C", "value": "5"}]',
            correct_answer='["A","C"]',
        ),
        Question(
            assignment_id=assignment.id, type=QuestionType.TRUE_FALSE, content="1 is prime", score=5, order=3,
            correct_answer="错",
        ),
        Question(
            assignment_id=assignment.id, type=QuestionType.FILL_BLANK, content="Capital of France", score=5,
            order=4, correct_answer="Paris",
        ),
        Question(
            assignment_id=assignment.id, type=QuestionType.ESSAY, content="Explain a proof", score=60, order=5,
            reference="Any valid induction argument",
        ),
    ]
    for question in questions:
        repos.questions.create(question)
    return assignment


@pytest.fixture
def questions(repos, published_assignment):
    """The fixture assignment's questions keyed by type name (multi-select under ``multi``)."""
    single, multi, true_false, fill, essay = repos.questions.list_by_assignment(published_assignment.id)
    return SimpleNamespace(single=single, multi=multi, true_false=true_false, fill=fill, essay=essay)
