# File: src/coursework/routers/student_submission_router.py

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models.user import User
from ..schemas.submission import (
    StudentAssignmentView,
    StudentSubmissionList,
    StudentSubmissionView,
    SubmissionRequest,
)
from ..services.submission_service import SubmissionService
from ..utils.dependencies import get_current_student, get_submission_service
from ..utils.errors import CourseworkError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Student Submissions"])

@router.post("", response_model=StudentSubmissionView)
def save_submission(
    data: SubmissionRequest,
    student: User = Depends(get_current_student),
    service: SubmissionService = Depends(get_submission_service),
):
    """Saves answers as a draft, or hands them in when ``status`` is ``submitted``."""
    logger.info(f"Submission save for assignment {data.assignment_id} by student {student.id} ({data.status})")
    try:
        submission = service.create_or_update_submission(data, student.id)
        return service.student_view(submission)
    except CourseworkError:
        raise
    except Exception as e:
        logger.error(f"Error saving submission for assignment {data.assignment_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while saving the submission.",
        )

@router.post("/assignments/{assignment_id}/submit", response_model=StudentSubmissionView)
def submit_assignment(
    assignment_id: int,
    student: User = Depends(get_current_student),
    service: SubmissionService = Depends(get_submission_service),
):
    """Hands in an existing draft."""
    submission = service.submit_assignment(assignment_id, student.id)
    return service.student_view(submission)

@router.get("", response_model=StudentSubmissionList)
def list_my_submissions(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    student: User = Depends(get_current_student),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.list_student_submissions(student.id, page, page_size)

@router.get("/assignments/{assignment_id}", response_model=StudentAssignmentView)
def view_assignment(
    assignment_id: int,
    student: User = Depends(get_current_student),
    service: SubmissionService = Depends(get_submission_service),
):
    """The assignment, its questions and the caller's own submission, if any."""
    return service.get_student_assignment_view(assignment_id, student.id)

@router.get("/{submission_id}", response_model=StudentSubmissionView)
def get_submission(
    submission_id: int,
    student: User = Depends(get_current_student),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.get_submission(submission_id, student.id)
