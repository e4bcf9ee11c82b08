"""Answer encodings: the stored text of correct and student answers.

Question types differ in the shape of their answers, so the database keeps a
single text column and this module converts it to one of three shapes:

* ``SingleKey``: a single option key, a fill-in literal or a true/false word.
* ``KeySet``: a set of option keys for multi-select choice questions, stored
  as a JSON array (``'["A","C"]'``).
* ``FreeText``: essay answers, never compared automatically.

A stored correct answer that starts with ``[`` marks a multi-select question;
the student's answer for such a question must then be a JSON array as well.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Iterable, Union

from coursework.models.question import QuestionType
from coursework.utils.errors import MalformedAnswerError


@dataclass(frozen=True)
class SingleKey:
    key: str

    def encode(self) -> str:
        return self.key


@dataclass(frozen=True)
class KeySet:
    keys: frozenset

    def encode(self) -> str:
        return json.dumps(sorted(self.keys), ensure_ascii=False)


@dataclass(frozen=True)
class FreeText:
    text: str

    def encode(self) -> str:
        return self.text


AnswerValue = Union[SingleKey, KeySet, FreeText]


def is_multi_select(correct_answer: str) -> bool:
    return correct_answer.startswith("[")


def parse_key_set(raw: str) -> KeySet:
    """Decode a JSON array of option keys."""
    try:
        keys = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedAnswerError(f"expected a JSON array of option keys: {e}")
    if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
        raise MalformedAnswerError("expected a JSON array of option keys")
    return KeySet(frozenset(keys))


def parse_correct_answer(question_type: QuestionType, stored: str) -> AnswerValue:
    if question_type == QuestionType.ESSAY:
        return FreeText(stored)
    if question_type == QuestionType.CHOICE and is_multi_select(stored):
        return parse_key_set(stored)
    return SingleKey(stored)


def parse_student_answer(question_type: QuestionType, correct: AnswerValue, stored: str) -> AnswerValue:
    """Decode a student's raw answer into the same shape as the correct answer."""
    if question_type == QuestionType.ESSAY:
        return FreeText(stored)
    if isinstance(correct, KeySet):
        return parse_key_set(stored)
    return SingleKey(stored)


def correct_keys(question_type: QuestionType, stored: str) -> list[str]:
    """Option keys a choice question treats as correct, in display order."""
    if question_type != QuestionType.CHOICE or not stored:
        return []
    value = parse_correct_answer(question_type, stored)
    if isinstance(value, KeySet):
        return sorted(value.keys)
    return [value.key]


def encode_multi_select(raw: str, option_keys: Iterable[str]) -> str:
    """Normalize a teacher-supplied multi-select answer into a JSON key array.

    Accepts a JSON array, a comma/space separated list (``"A, C"``) or
    concatenated single-character keys (``"AC"``). Only keys that name one of
    the question's options are kept.
    """
    option_keys = list(option_keys)
    raw = raw.strip()
    if is_multi_select(raw):
        chosen = set(parse_key_set(raw).keys)
    elif re.search(r"[,\s]", raw):
        chosen = {part for part in re.split(r"[,\s]+", raw) if part}
    else:
        chosen = set(raw)
    return KeySet(frozenset(k for k in option_keys if k in chosen)).encode()
