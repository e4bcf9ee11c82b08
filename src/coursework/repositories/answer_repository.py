"""AnswerRepository - IAnswerRepository on SQLModel."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from coursework.models import Answer
from coursework.repositories.ports import IAnswerRepository
from coursework.utils.time import get_current_time

logger = logging.getLogger(__name__)


class AnswerRepository(IAnswerRepository):

    def __init__(self, session: Session):
        self.session = session

    def create(self, answer: Answer) -> Answer:
        self.session.add(answer)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            stmt = select(Answer).where(
                Answer.submission_id == answer.submission_id,
                Answer.question_id == answer.question_id,
            )
            existing = self.session.exec(stmt).first()
            if existing is None:
                raise
            logger.info(
                f"Answer for submission {answer.submission_id} question {answer.question_id} "
                f"already stored; overwriting"
            )
            existing.content = answer.content
            return self.update(existing)
        self.session.refresh(answer)
        return answer

    def update(self, answer: Answer) -> Answer:
        answer.updated_at = get_current_time()
        self.session.add(answer)
        self.session.commit()
        self.session.refresh(answer)
        return answer

    def list_by_submission(self, submission_id: int) -> list[Answer]:
        stmt = select(Answer).where(Answer.submission_id == submission_id).order_by(Answer.id)
        return list(self.session.exec(stmt).all())

    def delete_by_submission(self, submission_id: int) -> None:
        for answer in self.session.exec(select(Answer).where(Answer.submission_id == submission_id)).all():
            self.session.delete(answer)
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
