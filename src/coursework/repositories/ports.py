"""
Storage ports

The workflow services only talk to storage through these interfaces; the
SQLModel implementations live next to this module and tests swap in
in-memory fakes. Every write is its own unit of work.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from coursework.models import (
    Answer,
    Assignment,
    AssignmentStatus,
    CourseClass,
    Question,
    Submission,
    SubmissionStatus,
)


class IClassRepository(ABC):

    @abstractmethod
    def get(self, class_id: int) -> Optional[CourseClass]:
        pass

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[CourseClass]:
        pass

    @abstractmethod
    def create(self, course_class: CourseClass) -> CourseClass:
        """Persist a class; raises DuplicateClassCodeError when the code is taken."""
        pass

    @abstractmethod
    @abstractmethod
    def update(self, course_class: CourseClass) -> CourseClass:
        """Persist changes; raises DuplicateClassCodeError when the new code is taken."""
        pass

    @abstractmethod
    def delete(self, class_id: int) -> None:
        pass

    def list_by_teacher(self, teacher_id: int) -> list[CourseClass]:
        pass


class IAssignmentRepository(ABC):

    @abstractmethod
    def get(self, assignment_id: int) -> Optional[Assignment]:
        pass

    @abstractmethod
    def create(self, assignment: Assignment) -> Assignment:
        pass

    @abstractmethod
    def update(self, assignment: Assignment) -> Assignment:
        pass

    @abstractmethod
    def delete(self, assignment_id: int) -> None:
        pass

    @abstractmethod
    def list(
        self,
        teacher_id: Optional[int] = None,
        class_id: Optional[int] = None,
        status: Optional[AssignmentStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Assignment], int]:
        """Newest first. Returns the page and the unpaged total."""
        pass


class IQuestionRepository(ABC):

    @abstractmethod
    def get(self, question_id: int) -> Optional[Question]:
        pass

    @abstractmethod
    def create(self, question: Question) -> Question:
        """Persist a question; raises DuplicateQuestionOrderError when its order is taken."""
        pass

    @abstractmethod
    def update(self, question: Question) -> Question:
        pass

    @abstractmethod
    def delete(self, question_id: int) -> None:
        pass

    @abstractmethod
    def list_by_assignment(self, assignment_id: int) -> list[Question]:
        """Ordered by ``order`` ascending."""
        pass

    @abstractmethod
    def delete_by_assignment(self, assignment_id: int) -> None:
        pass


class ISubmissionRepository(ABC):

    @abstractmethod
    def get(self, submission_id: int) -> Optional[Submission]:
        pass

    @abstractmethod
    def get_by_assignment_and_student(self, assignment_id: int, student_id: int) -> Optional[Submission]:
        pass

    @abstractmethod
    def create_if_absent(self, submission: Submission) -> tuple[Submission, bool]:
        """
        Insert ``submission`` unless the student already has one for the
        assignment. Returns the stored row and whether it was newly created.
        """
        pass

    @abstractmethod
    def update(self, submission: Submission) -> Submission:
        pass

    @abstractmethod
    def list_by_assignment(
        self,
        assignment_id: int,
        status: Optional[SubmissionStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Submission], int]:
        pass

    @abstractmethod
    def list_by_student(
        self, student_id: int, offset: int = 0, limit: Optional[int] = None
    ) -> tuple[list[Submission], int]:
        pass

    @abstractmethod
    def count_by_status(self, assignment_id: int) -> dict[SubmissionStatus, int]:
        pass

    @abstractmethod
    def delete_by_assignment(self, assignment_id: int) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard a unit of work left pending by a failed write."""
        pass


class IAnswerRepository(ABC):

    @abstractmethod
    def create(self, answer: Answer) -> Answer:
        """Insert an answer; an existing row for the same question is overwritten instead."""
        pass

    @abstractmethod
    def update(self, answer: Answer) -> Answer:
        pass

    @abstractmethod
    def list_by_submission(self, submission_id: int) -> list[Answer]:
        pass

    @abstractmethod
    def delete_by_submission(self, submission_id: int) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass


class ICache(ABC):

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None on a miss."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass
