"""QuestionRepository - IQuestionRepository on SQLModel, reads through an ICache."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from coursework.models import Question
from coursework.repositories.cache import NoOpCache
from coursework.repositories.ports import ICache, IQuestionRepository
from coursework.utils.errors import DuplicateQuestionOrderError

logger = logging.getLogger(__name__)

QUESTION_LIST_TTL_SECONDS = 300


def _list_key(assignment_id: int) -> str:
    return f"assignment:{assignment_id}:questions"


class QuestionRepository(IQuestionRepository):

    def __init__(self, session: Session, cache: Optional[ICache] = None):
        self.session = session
        self.cache = cache or NoOpCache()

    def get(self, question_id: int) -> Optional[Question]:
        return self.session.get(Question, question_id)

    def create(self, question: Question) -> Question:
        self._commit(question)
        self.session.refresh(question)
        self.cache.delete(_list_key(question.assignment_id))
        return question

    def update(self, question: Question) -> Question:
        self._commit(question)
        self.session.refresh(question)
        self.cache.delete(_list_key(question.assignment_id))
        return question

    def _commit(self, question: Question) -> None:
        self.session.add(question)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info(f"Order {question.order} already used in assignment {question.assignment_id}")
            raise DuplicateQuestionOrderError()

    def delete(self, question_id: int) -> None:
        question = self.session.get(Question, question_id)
        if question:
            assignment_id = question.assignment_id
            self.session.delete(question)
            self.session.commit()
            self.cache.delete(_list_key(assignment_id))

    def list_by_assignment(self, assignment_id: int) -> list[Question]:
        key = _list_key(assignment_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        stmt = (
            select(Question)
            .where(Question.assignment_id == assignment_id)
            .order_by(Question.order, Question.id)
        )
        questions = list(self.session.exec(stmt).all())
        self.cache.set(key, questions, QUESTION_LIST_TTL_SECONDS)
        return questions

    def delete_by_assignment(self, assignment_id: int) -> None:
        for question in self.session.exec(select(Question).where(Question.assignment_id == assignment_id)).all():
            self.session.delete(question)
        self.session.commit()
        self.cache.delete(_list_key(assignment_id))
