# File: src/coursework/routers/auth_router.py

import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..db.session import get_db
from ..models.user import User
from ..schemas.user import Token, UserCreate, UserRead
from ..utils.dependencies import get_current_user
from ..utils.errors import DuplicateUserCodeError
from ..utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, db: Session = Depends(get_db)):
    """Creates a login; the code doubles as student number for students."""
    code = data.code.strip()
    if db.exec(select(User).where(User.code == code)).first():
        raise DuplicateUserCodeError()

    user = User(code=code, name=data.name, role=data.role, hashed_password=hash_password(data.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateUserCodeError()
    db.refresh(user)
    logger.info(f"Registered {user.role.value} {user.id} ({code})")
    return user

@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Session = Depends(get_db),
):
    """Exchanges a user code and password for a bearer token."""
    user = db.exec(select(User).where(User.code == form_data.username)).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login for {form_data.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect code or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    token = create_access_token({"user_id": str(user.id), "role": user.role.value})
    logger.info(f"User {user.id} logged in")
    return Token(access_token=token)

@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
