"""SubmissionRepository - ISubmissionRepository on SQLModel."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from coursework.models import Submission, SubmissionStatus
from coursework.repositories.ports import ISubmissionRepository
from coursework.utils.time import get_current_time

logger = logging.getLogger(__name__)


class SubmissionRepository(ISubmissionRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self, submission_id: int) -> Optional[Submission]:
        return self.session.get(Submission, submission_id)

    def get_by_assignment_and_student(self, assignment_id: int, student_id: int) -> Optional[Submission]:
        stmt = select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
        return self.session.exec(stmt).first()

    def create_if_absent(self, submission: Submission) -> tuple[Submission, bool]:
        self.session.add(submission)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost the race against a concurrent first save for the same student.
            self.session.rollback()
            existing = self.get_by_assignment_and_student(submission.assignment_id, submission.student_id)
            if existing is None:
                raise
            logger.info(
                f"Submission for assignment {submission.assignment_id} / student "
                f"{submission.student_id} already exists; reusing {existing.id}"
            )
            return existing, False
        self.session.refresh(submission)
        return submission, True

    def update(self, submission: Submission) -> Submission:
        submission.updated_at = get_current_time()
        self.session.add(submission)
        self.session.commit()
        self.session.refresh(submission)
        return submission

    def list_by_assignment(
        self,
        assignment_id: int,
        status: Optional[SubmissionStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Submission], int]:
        conditions = [Submission.assignment_id == assignment_id]
        if status is not None:
            conditions.append(Submission.status == status)
        return self._page(conditions, offset, limit)

    def list_by_student(
        self, student_id: int, offset: int = 0, limit: Optional[int] = None
    ) -> tuple[list[Submission], int]:
        return self._page([Submission.student_id == student_id], offset, limit)

    def _page(self, conditions, offset: int, limit: Optional[int]) -> tuple[list[Submission], int]:
        total = self.session.exec(select(func.count()).select_from(Submission).where(*conditions)).one()
        stmt = (
            select(Submission)
            .where(*conditions)
            .order_by(Submission.created_at.desc(), Submission.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all()), total

    def count_by_status(self, assignment_id: int) -> dict[SubmissionStatus, int]:
        stmt = (
            select(Submission.status, func.count())
            .where(Submission.assignment_id == assignment_id)
            .group_by(Submission.status)
        )
        counts = {s: 0 for s in SubmissionStatus}
        for status, count in self.session.exec(stmt).all():
            counts[SubmissionStatus(status)] = count
        return counts

    def delete_by_assignment(self, assignment_id: int) -> None:
        for submission in self.session.exec(select(Submission).where(Submission.assignment_id == assignment_id)).all():
            self.session.delete(submission)
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
