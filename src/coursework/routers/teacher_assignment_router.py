# File: src/coursework/routers/teacher_assignment_router.py

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ..models.assignment import AssignmentStatus
from ..models.user import User
from ..schemas.assignment import (
    AssignmentCreate,
    AssignmentDetail,
    AssignmentList,
    AssignmentRead,
    AssignmentStatistics,
    AssignmentUpdate,
)
from ..schemas.question import QuestionCreate, QuestionDetail, QuestionRead
from ..services.assignment_service import AssignmentService
from ..services.question_service import QuestionService
from ..utils.dependencies import get_assignment_service, get_current_teacher, get_question_service

router = APIRouter(tags=["Teacher Assignments"])

# --- Assignment Management Endpoints ---

@router.post("", response_model=AssignmentDetail, status_code=status.HTTP_201_CREATED)
def create_assignment(
    data: AssignmentCreate,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Creates an assignment, optionally with its questions in the same request."""
    return service.create_assignment(data, teacher.id)

@router.get("", response_model=AssignmentList)
def list_assignments(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    class_id: Optional[int] = None,
    status: Optional[AssignmentStatus] = None,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.list_teacher_assignments(teacher.id, page, page_size, class_id=class_id, status=status)

@router.get("/{assignment_id}", response_model=AssignmentDetail)
def get_assignment(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.get_assignment_detail(assignment_id, teacher.id)

@router.put("/{assignment_id}", response_model=AssignmentRead)
def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.update_assignment(assignment_id, data, teacher.id)

@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    service.delete_assignment(assignment_id, teacher.id)

@router.post("/{assignment_id}/publish", response_model=AssignmentRead)
def publish_assignment(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.publish_assignment(assignment_id, teacher.id)

@router.post("/{assignment_id}/unpublish", response_model=AssignmentRead)
def unpublish_assignment(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.unpublish_assignment(assignment_id, teacher.id)

@router.get("/{assignment_id}/statistics", response_model=AssignmentStatistics)
def assignment_statistics(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: AssignmentService = Depends(get_assignment_service),
):
    return service.get_assignment_statistics(assignment_id, teacher.id)

# --- Nested Question Endpoints ---

@router.post("/{assignment_id}/questions", response_model=QuestionRead, status_code=status.HTTP_201_CREATED)
def add_question(
    assignment_id: int,
    data: QuestionCreate,
    teacher: User = Depends(get_current_teacher),
    service: QuestionService = Depends(get_question_service),
):
    """Adds a question to a draft assignment."""
    return service.create_question(assignment_id, data, teacher.id)

@router.get("/{assignment_id}/questions", response_model=List[QuestionDetail])
def list_questions(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: QuestionService = Depends(get_question_service),
):
    return service.list_questions(assignment_id, teacher.id)
