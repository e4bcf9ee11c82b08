# File: src/coursework/routers/teacher_question_router.py

from fastapi import APIRouter, Depends, status

from ..models.user import User
from ..schemas.question import QuestionRead, QuestionUpdate
from ..services.question_service import QuestionService
from ..utils.dependencies import get_current_teacher, get_question_service

router = APIRouter(tags=["Teacher Questions"])

@router.put("/{question_id}", response_model=QuestionRead)
def update_question(
    question_id: int,
    data: QuestionUpdate,
    teacher: User = Depends(get_current_teacher),
    service: QuestionService = Depends(get_question_service),
):
    return service.update_question(question_id, data, teacher.id)

@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    teacher: User = Depends(get_current_teacher),
    service: QuestionService = Depends(get_question_service),
):
    service.delete_question(question_id, teacher.id)
