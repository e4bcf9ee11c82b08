# user.py
from sqlmodel import SQLModel, Field, Column
from typing import Optional
from datetime import datetime
import enum
from sqlalchemy import Enum as SQLAlchemyEnum
from coursework.utils.time import get_current_time


class UserRole(str, enum.Enum):
    TEACHER = "teacher"
    STUDENT = "student"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, unique=True, index=True)  # login name / student number
    name: str = Field(max_length=50)
    role: UserRole = Field(sa_column=Column(SQLAlchemyEnum(UserRole), nullable=False))
    hashed_password: str
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=get_current_time)
