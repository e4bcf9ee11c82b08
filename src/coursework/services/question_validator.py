"""Objective-question checking: correctness and score of one answer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from coursework.models.question import QuestionType
from coursework.services.answer_format import (
    KeySet,
    parse_correct_answer,
    parse_student_answer,
)
from coursework.utils.errors import InputValidationError, MissingCorrectAnswerError

if TYPE_CHECKING:
    from coursework.models.question import Question


_TRUE_WORDS = {"true", "True", "TRUE", "1", "对", "正确", "是"}
_FALSE_WORDS = {"false", "False", "FALSE", "0", "错", "错误", "否"}


def normalize_boolean(value: str) -> str:
    """Map the accepted spellings of true/false onto ``"true"``/``"false"``.

    Anything unrecognised passes through unchanged, so it can only match a
    correct answer spelled the same way.
    """
    if value in _TRUE_WORDS:
        return "true"
    if value in _FALSE_WORDS:
        return "false"
    return value


def validate(question: Question, answer_content: str) -> tuple[bool, int]:
    """Check ``answer_content`` against ``question``.

    Returns
    -------
    tuple[bool, int]
        ``(is_correct, score)``

        * ``choice``: single-select is an exact key match; multi-select
          (correct answer stored as a JSON array) requires the same key set,
          order ignored.
        * ``fill_blank``: exact, case-sensitive match.
        * ``true_false``: both sides normalized with :func:`normalize_boolean`.
        * ``essay``: always ``(False, 0)``; graded by hand.

    A correct answer earns the question's full score, never partial credit.

    Raises
    ------
    MissingCorrectAnswerError
        An objective question has no correct answer configured.
    MalformedAnswerError
        A multi-select answer is not a JSON array of keys.
    """
    if question.type == QuestionType.ESSAY:
        return False, 0

    if question.type not in (QuestionType.CHOICE, QuestionType.FILL_BLANK, QuestionType.TRUE_FALSE):
        raise InputValidationError(f"unsupported question type: {question.type}")

    if not question.correct_answer:
        raise MissingCorrectAnswerError()

    if question.type == QuestionType.TRUE_FALSE:
        correct = normalize_boolean(question.correct_answer) == normalize_boolean(answer_content)
    else:
        expected = parse_correct_answer(question.type, question.correct_answer)
        given = parse_student_answer(question.type, expected, answer_content)
        if isinstance(expected, KeySet):
            # set comparison: order-free, duplicates collapse
            correct = expected.keys == given.keys
        else:
            correct = expected == given

    return correct, question.score if correct else 0
