# File: src/coursework/schemas/user.py

from pydantic import BaseModel, Field

from ..models.user import UserRole

class UserRead(BaseModel):
    id: int
    code: str
    name: str
    role: UserRole
    is_active: bool

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserCreate(BaseModel):
    code: str = Field(min_length=5, max_length=20)
    name: str = Field(min_length=2, max_length=50)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.STUDENT
