# File: src/coursework/routers/grading_router.py

import logging
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..models.submission import SubmissionStatus
from ..models.user import User
from ..schemas.assignment import AssignmentRead
from ..schemas.grading import (
    BatchGradeRequest,
    BatchGradeResult,
    GradeSubmissionRequest,
    GradingDetail,
    GradingProgress,
    SubmissionListForGrading,
    SubmissionStatistics,
)
from ..schemas.submission import SubmissionDetail
from ..services.grading_service import GradingService
from ..utils.dependencies import get_current_teacher, get_grading_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Teacher Grading"])

# --- Assignment-level Endpoints ---

@router.get("/assignments/{assignment_id}/submissions", response_model=SubmissionListForGrading)
def submissions_for_grading(
    assignment_id: int,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[SubmissionStatus] = None,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    return service.get_submissions_for_grading(assignment_id, teacher.id, page, page_size, status)

@router.get("/assignments/{assignment_id}/progress", response_model=GradingProgress)
def grading_progress(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    return service.get_grading_progress(assignment_id, teacher.id)

@router.get("/assignments/{assignment_id}/statistics", response_model=SubmissionStatistics)
def submission_statistics(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    return service.get_submission_statistics(assignment_id, teacher.id)

@router.post("/assignments/{assignment_id}/publish", response_model=AssignmentRead)
def publish_grades(
    assignment_id: int,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    """Makes scores and feedback of graded submissions visible to students."""
    return service.publish_grades(assignment_id, teacher.id)

# --- Submission-level Endpoints ---

@router.get("/submissions/{submission_id}", response_model=GradingDetail)
def grading_detail(
    submission_id: int,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    return service.get_grading_detail(submission_id, teacher.id)

@router.post("/submissions/{submission_id}/grade", response_model=SubmissionDetail)
def grade_submission(
    submission_id: int,
    data: GradeSubmissionRequest,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    return service.grade_submission(submission_id, data, teacher.id)

@router.post("/batch", response_model=List[BatchGradeResult])
def batch_grade(
    data: BatchGradeRequest,
    teacher: User = Depends(get_current_teacher),
    service: GradingService = Depends(get_grading_service),
):
    """Grades several submissions; each item succeeds or fails on its own."""
    logger.info(f"Batch grading {len(data.submissions)} submissions by teacher {teacher.id}")
    return service.batch_grade(data, teacher.id)
