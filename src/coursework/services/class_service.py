"""Teacher-owned classes; assignments are always created inside one."""
import logging
from typing import List

from coursework.models import CourseClass
from coursework.repositories.ports import IAssignmentRepository, IClassRepository
from coursework.schemas.course_class import CourseClassCreate, CourseClassUpdate
from coursework.utils.errors import (
    ClassHasAssignmentsError,
    ClassNotFoundError,
    DuplicateClassCodeError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


class ClassService:
    def __init__(self, classes: IClassRepository, assignments: IAssignmentRepository):
        self.classes = classes
        self.assignments = assignments

    def create_class(self, request: CourseClassCreate, teacher_id: int) -> CourseClass:
        code = request.code.strip()
        if self.classes.get_by_code(code):
            raise DuplicateClassCodeError()
        course_class = self.classes.create(
            CourseClass(code=code, name=request.name, description=request.description, teacher_id=teacher_id)
        )
        logger.info(f"Teacher {teacher_id} created class {course_class.id} ({code})")
        return course_class

    def _get_owned(self, class_id: int, teacher_id: int, action: str) -> CourseClass:
        course_class = self.classes.get(class_id)
        if not course_class:
            raise ClassNotFoundError()
        if course_class.teacher_id != teacher_id:
            raise PermissionDeniedError(f"teacher has no permission to {action} this class")
        return course_class

    def get_class(self, class_id: int, teacher_id: int) -> CourseClass:
        return self._get_owned(class_id, teacher_id, "view")

    def update_class(self, class_id: int, request: CourseClassUpdate, teacher_id: int) -> CourseClass:
        course_class = self._get_owned(class_id, teacher_id, "update")

        code = request.code.strip() if request.code else None
        if code and code != course_class.code:
            existing = self.classes.get_by_code(code)
            if existing and existing.id != class_id:
                raise DuplicateClassCodeError()
            course_class.code = code
        if request.name:
            course_class.name = request.name
        if request.description is not None:
            course_class.description = request.description

        course_class = self.classes.update(course_class)
        logger.info(f"Class {class_id} updated by teacher {teacher_id}")
        return course_class

    def delete_class(self, class_id: int, teacher_id: int) -> None:
        self._get_owned(class_id, teacher_id, "delete")
        _, total = self.assignments.list(class_id=class_id, limit=1)
        if total:
            logger.warning(f"Class {class_id} still has {total} assignments; delete refused")
            raise ClassHasAssignmentsError()
        self.classes.delete(class_id)
        logger.info(f"Class {class_id} deleted by teacher {teacher_id}")

    def list_classes(self, teacher_id: int) -> List[CourseClass]:
        return self.classes.list_by_teacher(teacher_id)
