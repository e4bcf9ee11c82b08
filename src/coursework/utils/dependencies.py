# File location: src/coursework/utils/dependencies.py
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from coursework.db.session import get_db
from coursework.models import User, UserRole
from coursework.repositories import (
    AnswerRepository,
    AssignmentRepository,
    ClassRepository,
    NoOpCache,
    QuestionRepository,
    SubmissionRepository,
)
from coursework.services import (
    AssignmentService,
    ClassService,
    GradingService,
    QuestionService,
    SubmissionService,
)
from coursework.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")

_question_cache = NoOpCache()


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Dependency to get the current user from a JWT token provided
    in the Authorization header.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_access_token(token)
    user_id = payload.get("user_id")
    if user_id is None:
        raise credentials_exception

    try:
        user = session.get(User, int(user_id))
    except (TypeError, ValueError):
        raise credentials_exception
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return user


async def get_current_teacher(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """
    Dependency to get the current user and verify they are a teacher.
    """
    if current_user.role != UserRole.TEACHER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Teacher access required.",
        )
    return current_user


async def get_current_student(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    if current_user.role != UserRole.STUDENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Student access required.",
        )
    return current_user


# --- Service factories ---

def get_class_service(session: Annotated[Session, Depends(get_db)]) -> ClassService:
    return ClassService(ClassRepository(session), AssignmentRepository(session))


def get_question_service(session: Annotated[Session, Depends(get_db)]) -> QuestionService:
    return QuestionService(AssignmentRepository(session), QuestionRepository(session, _question_cache))


def get_assignment_service(session: Annotated[Session, Depends(get_db)]) -> AssignmentService:
    return AssignmentService(
        AssignmentRepository(session),
        QuestionRepository(session, _question_cache),
        SubmissionRepository(session),
        AnswerRepository(session),
        ClassRepository(session),
    )


def get_submission_service(session: Annotated[Session, Depends(get_db)]) -> SubmissionService:
    return SubmissionService(
        AssignmentRepository(session),
        QuestionRepository(session, _question_cache),
        SubmissionRepository(session),
        AnswerRepository(session),
    )


def get_grading_service(session: Annotated[Session, Depends(get_db)]) -> GradingService:
    return GradingService(
        AssignmentRepository(session),
        QuestionRepository(session, _question_cache),
        SubmissionRepository(session),
        AnswerRepository(session),
    )
