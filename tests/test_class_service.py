"""Tests for services/class_service.py."""
import pytest

from coursework.schemas.course_class import CourseClassCreate, CourseClassUpdate
from coursework.services.class_service import ClassService
from coursework.utils.errors import (
    ClassHasAssignmentsError,
    ClassNotFoundError,
    DuplicateClassCodeError,
    ErrorKind,
    PermissionDeniedError,
)
from tests.conftest import OTHER_TEACHER_ID, TEACHER_ID


@pytest.fixture
def service(repos):
    return ClassService(repos.classes, repos.assignments)


def test_create_and_list(service):
    created = service.create_class(CourseClassCreate(code=" PHY-2 ", name="Physics"), TEACHER_ID)
    assert created.code == "PHY-2"
    assert [c.id for c in service.list_classes(TEACHER_ID)] == [created.id]
    assert service.list_classes(OTHER_TEACHER_ID) == []


def test_duplicate_code(service):
    service.create_class(CourseClassCreate(code="PHY-2", name="Physics"), TEACHER_ID)
    with pytest.raises(DuplicateClassCodeError) as exc:
        service.create_class(CourseClassCreate(code="PHY-2", name="Physics again"), OTHER_TEACHER_ID)
    assert exc.value.kind == ErrorKind.VALIDATION_ERROR


def test_get_class_checks_owner(service):
    created = service.create_class(CourseClassCreate(code="PHY-2", name="Physics"), TEACHER_ID)
    assert service.get_class(created.id, TEACHER_ID).name == "Physics"
    with pytest.raises(PermissionDeniedError):
        service.get_class(created.id, OTHER_TEACHER_ID)
    with pytest.raises(ClassNotFoundError):
        service.get_class(999, TEACHER_ID)


def test_update_class(service):
    created = service.create_class(CourseClassCreate(code="PHY-2", name="Physics"), TEACHER_ID)
    updated = service.update_class(
        created.id, CourseClassUpdate(code="PHY-3", description="Year three"), TEACHER_ID
    )
    assert (updated.code, updated.name, updated.description) == ("PHY-3", "Physics", "Year three")

    with pytest.raises(PermissionDeniedError):
        service.update_class(created.id, CourseClassUpdate(name="Taken over"), OTHER_TEACHER_ID)


def test_update_class_to_taken_code(service):
    service.create_class(CourseClassCreate(code="CHEM-1", name="Chemistry"), TEACHER_ID)
    physics = service.create_class(CourseClassCreate(code="PHY-2", name="Physics"), TEACHER_ID)
    with pytest.raises(DuplicateClassCodeError):
        service.update_class(physics.id, CourseClassUpdate(code="CHEM-1"), TEACHER_ID)
    assert service.get_class(physics.id, TEACHER_ID).code == "PHY-2"


def test_delete_class(service):
    created = service.create_class(CourseClassCreate(code="PHY-2", name="Physics"), TEACHER_ID)
    with pytest.raises(PermissionDeniedError):
        service.delete_class(created.id, OTHER_TEACHER_ID)
    service.delete_class(created.id, TEACHER_ID)
    with pytest.raises(ClassNotFoundError):
        service.get_class(created.id, TEACHER_ID)


def test_delete_class_with_assignments_is_refused(service, published_assignment, course_class):
    with pytest.raises(ClassHasAssignmentsError) as exc:
        service.delete_class(course_class.id, TEACHER_ID)
    assert exc.value.kind == ErrorKind.INVALID_STATE
    assert service.get_class(course_class.id, TEACHER_ID) is course_class
