"""Teacher-side question management, gated on the parent assignment's publish state."""
import json
import logging
from typing import List, Optional

from coursework.models import Assignment, AssignmentStatus, Question, QuestionType
from coursework.repositories.ports import IAssignmentRepository, IQuestionRepository
from coursework.schemas.question import (
    QuestionCreate,
    QuestionDetail,
    QuestionOption,
    QuestionStudentView,
    QuestionUpdate,
)
from coursework.services.answer_format import correct_keys, encode_multi_select, is_multi_select
from coursework.utils.errors import (
    AssignmentNotFoundError,
    DuplicateQuestionOrderError,
    InputValidationError,
    MissingCorrectAnswerError,
    PermissionDeniedError,
    PublishedAssignmentLockedError,
    QuestionNotFoundError,
    UnknownOptionKeyError,
)

logger = logging.getLogger(__name__)


def serialize_options(options: List[QuestionOption]) -> str:
    if not options:
        return ""
    return json.dumps([o.model_dump() for o in options], ensure_ascii=False)


def decode_options(question: Question) -> List[QuestionOption]:
    """Option list of a choice question; anything unreadable decodes to no options."""
    if question.type != QuestionType.CHOICE or not question.options:
        return []
    try:
        return [QuestionOption(**o) for o in json.loads(question.options)]
    except (TypeError, ValueError) as e:
        logger.warning(f"Question {question.id} has unreadable options: {e}")
        return []


def normalize_choice_answer(raw: str, option_keys: List[str], multiple: bool) -> str:
    """Stored correct answer of a choice question, checked against its option keys."""
    raw = raw.strip()
    if multiple:
        encoded = encode_multi_select(raw, option_keys)
        if encoded == "[]":
            raise MissingCorrectAnswerError()
        return encoded
    if is_multi_select(raw):
        keys = correct_keys(QuestionType.CHOICE, raw)
        if len(keys) != 1:
            raise InputValidationError("a single-select question needs exactly one correct key")
        raw = keys[0]
    if not raw:
        raise MissingCorrectAnswerError()
    if option_keys and raw not in option_keys:
        raise UnknownOptionKeyError(f"option {raw!r} does not exist")
    return raw


def build_question(assignment_id: int, request: QuestionCreate) -> Question:
    """Turn a create request into an unsaved Question, normalizing its correct answer."""
    correct_answer = request.correct_answer.strip()
    if request.type == QuestionType.CHOICE:
        correct_answer = normalize_choice_answer(
            correct_answer, [o.key for o in request.options], request.is_multiple
        )
    elif request.type != QuestionType.ESSAY and not correct_answer:
        raise MissingCorrectAnswerError()

    return Question(
        assignment_id=assignment_id,
        type=request.type,
        content=request.content,
        score=request.score,
        order=request.order,
        options=serialize_options(request.options) if request.type == QuestionType.CHOICE else "",
        correct_answer=correct_answer,
        reference=request.reference,
        explanation=request.explanation,
    )


def to_question_detail(question: Question) -> QuestionDetail:
    return QuestionDetail(
        **question.model_dump(exclude={"created_at"}),
        option_list=decode_options(question),
        is_multiple=question.type == QuestionType.CHOICE and is_multi_select(question.correct_answer),
        correct_keys=correct_keys(question.type, question.correct_answer),
    )


def to_student_view(question: Question) -> QuestionStudentView:
    return QuestionStudentView(
        id=question.id,
        type=question.type,
        content=question.content,
        score=question.score,
        order=question.order,
        option_list=decode_options(question),
        is_multiple=question.type == QuestionType.CHOICE and is_multi_select(question.correct_answer),
    )


class QuestionService:
    def __init__(self, assignments: IAssignmentRepository, questions: IQuestionRepository):
        self.assignments = assignments
        self.questions = questions

    def _editable_assignment(self, assignment_id: int, teacher_id: int) -> Assignment:
        assignment = self.assignments.get(assignment_id)
        if not assignment:
            raise AssignmentNotFoundError()
        if assignment.teacher_id != teacher_id:
            raise PermissionDeniedError("teacher has no permission to modify this assignment")
        if assignment.status != AssignmentStatus.DRAFT:
            logger.warning(f"Question change rejected: assignment {assignment_id} is {assignment.status.value}")
            if assignment.status == AssignmentStatus.CLOSED:
                raise PublishedAssignmentLockedError("cannot modify question in closed assignment")
            raise PublishedAssignmentLockedError()
        return assignment

    def _get_question(self, question_id: int) -> Question:
        question = self.questions.get(question_id)
        if not question:
            raise QuestionNotFoundError()
        return question

    def _check_order_free(self, assignment_id: int, order: int) -> None:
        if any(q.order == order for q in self.questions.list_by_assignment(assignment_id)):
            raise DuplicateQuestionOrderError(f"order {order} is already used in assignment {assignment_id}")

    def create_question(self, assignment_id: int, request: QuestionCreate, teacher_id: int) -> Question:
        self._editable_assignment(assignment_id, teacher_id)
        question = build_question(assignment_id, request)
        self._check_order_free(assignment_id, question.order)
        question = self.questions.create(question)
        logger.info(f"Question {question.id} ({question.type.value}) added to assignment {assignment_id}")
        return question

    def update_question(self, question_id: int, request: QuestionUpdate, teacher_id: int) -> Question:
        question = self._get_question(question_id)
        self._editable_assignment(question.assignment_id, teacher_id)

        if request.order and request.order != question.order:
            self._check_order_free(question.assignment_id, request.order)

        options = question.options
        correct_answer = question.correct_answer
        if request.options and question.type == QuestionType.CHOICE:
            options = serialize_options(request.options)
        if request.correct_answer:
            correct_answer = request.correct_answer.strip()
        if question.type == QuestionType.CHOICE:
            option_keys = [o.key for o in (request.options or decode_options(question))]
            multiple = is_multi_select(question.correct_answer) if request.is_multiple is None else request.is_multiple
            if request.options and not request.correct_answer:
                missing = set(correct_keys(QuestionType.CHOICE, correct_answer)) - set(option_keys)
                if missing:
                    raise UnknownOptionKeyError(
                        f"correct answer uses options {sorted(missing)} that the new option list drops"
                    )
            correct_answer = normalize_choice_answer(correct_answer, option_keys, multiple)

        if request.content:
            question.content = request.content
        if request.score:
            question.score = request.score
        if request.order:
            question.order = request.order
        question.options = options
        question.correct_answer = correct_answer
        if request.reference:
            question.reference = request.reference
        if request.explanation:
            question.explanation = request.explanation

        question = self.questions.update(question)
        logger.info(f"Question {question_id} updated")
        return question

    def delete_question(self, question_id: int, teacher_id: int) -> None:
        question = self._get_question(question_id)
        self._editable_assignment(question.assignment_id, teacher_id)
        self.questions.delete(question_id)
        logger.info(f"Question {question_id} removed from assignment {question.assignment_id}")

    def list_questions(self, assignment_id: int, teacher_id: Optional[int] = None) -> List[QuestionDetail]:
        assignment = self.assignments.get(assignment_id)
        if not assignment:
            raise AssignmentNotFoundError()
        if teacher_id is not None and assignment.teacher_id != teacher_id:
            raise PermissionDeniedError("teacher has no permission to view this assignment")
        return [to_question_detail(q) for q in self.questions.list_by_assignment(assignment_id)]
