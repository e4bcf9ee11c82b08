"""AssignmentRepository - IAssignmentRepository on SQLModel."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from coursework.models import Assignment, AssignmentStatus
from coursework.repositories.ports import IAssignmentRepository
from coursework.utils.time import get_current_time


class AssignmentRepository(IAssignmentRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self, assignment_id: int) -> Optional[Assignment]:
        return self.session.get(Assignment, assignment_id)

    def create(self, assignment: Assignment) -> Assignment:
        self.session.add(assignment)
        self.session.commit()
        self.session.refresh(assignment)
        return assignment

    def update(self, assignment: Assignment) -> Assignment:
        assignment.updated_at = get_current_time()
        self.session.add(assignment)
        self.session.commit()
        self.session.refresh(assignment)
        return assignment

    def delete(self, assignment_id: int) -> None:
        assignment = self.session.get(Assignment, assignment_id)
        if assignment:
            self.session.delete(assignment)
            self.session.commit()

    def list(
        self,
        teacher_id: Optional[int] = None,
        class_id: Optional[int] = None,
        status: Optional[AssignmentStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Assignment], int]:
        conditions = []
        if teacher_id is not None:
            conditions.append(Assignment.teacher_id == teacher_id)
        if class_id is not None:
            conditions.append(Assignment.class_id == class_id)
        if status is not None:
            conditions.append(Assignment.status == status)

        total = self.session.exec(select(func.count()).select_from(Assignment).where(*conditions)).one()

        stmt = (
            select(Assignment)
            .where(*conditions)
            .order_by(Assignment.created_at.desc(), Assignment.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all()), total
