"""ClassRepository - IClassRepository on SQLModel."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from coursework.models import CourseClass
from coursework.repositories.ports import IClassRepository
from coursework.utils.errors import DuplicateClassCodeError

logger = logging.getLogger(__name__)


class ClassRepository(IClassRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self, class_id: int) -> Optional[CourseClass]:
        return self.session.get(CourseClass, class_id)

    def get_by_code(self, code: str) -> Optional[CourseClass]:
        return self.session.exec(select(CourseClass).where(CourseClass.code == code)).first()

    def create(self, course_class: CourseClass) -> CourseClass:
        return self._save(course_class)

    def update(self, course_class: CourseClass) -> CourseClass:
        return self._save(course_class)

    def _save(self, course_class: CourseClass) -> CourseClass:
        self.session.add(course_class)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info(f"Class code {course_class.code!r} already exists")
            raise DuplicateClassCodeError()
        self.session.refresh(course_class)
        return course_class

    def delete(self, class_id: int) -> None:
        course_class = self.session.get(CourseClass, class_id)
        if course_class:
            self.session.delete(course_class)
            self.session.commit()

    def list_by_teacher(self, teacher_id: int) -> list[CourseClass]:
        stmt = (
            select(CourseClass)
            .where(CourseClass.teacher_id == teacher_id)
            .order_by(CourseClass.created_at.desc(), CourseClass.id.desc())
        )
        return list(self.session.exec(stmt).all())
