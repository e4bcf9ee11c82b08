# File: src/coursework/routers/class_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..models.user import User
from ..schemas.course_class import CourseClassCreate, CourseClassRead, CourseClassUpdate
from ..services.class_service import ClassService
from ..utils.dependencies import get_class_service, get_current_teacher

router = APIRouter(tags=["Teacher Classes"])

@router.post("", response_model=CourseClassRead, status_code=status.HTTP_201_CREATED)
def create_class(
    data: CourseClassCreate,
    teacher: User = Depends(get_current_teacher),
    service: ClassService = Depends(get_class_service),
):
    return service.create_class(data, teacher.id)

@router.get("", response_model=List[CourseClassRead])
def list_classes(
    teacher: User = Depends(get_current_teacher),
    service: ClassService = Depends(get_class_service),
):
    return service.list_classes(teacher.id)

@router.get("/{class_id}", response_model=CourseClassRead)
def get_class(
    class_id: int,
    teacher: User = Depends(get_current_teacher),
    service: ClassService = Depends(get_class_service),
):
    return service.get_class(class_id, teacher.id)

@router.put("/{class_id}", response_model=CourseClassRead)
def update_class(
    class_id: int,
    data: CourseClassUpdate,
    teacher: User = Depends(get_current_teacher),
    service: ClassService = Depends(get_class_service),
):
    return service.update_class(class_id, data, teacher.id)

@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class(
    class_id: int,
    teacher: User = Depends(get_current_teacher),
    service: ClassService = Depends(get_class_service),
):
    service.delete_class(class_id, teacher.id)
