"""User/인증 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Literal
from datetime import datetime

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

Role = Literal["student", "faculty", "admin"]


class UserRef(BaseModel):
    """응답에 포함되는 사용자 표시 정보 (populate 결과)."""

    id: int = Field(validation_alias=AliasChoices("user_id", "id"))
    name: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class LikeUserRef(BaseModel):
    id: int = Field(validation_alias=AliasChoices("user_id", "id"))
    name: str

    model_config = {"from_attributes": True}


class UserOut(UserRef):
    is_active: bool
    created_at: datetime


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=100)
    # bcrypt는 72바이트까지만 사용한다.
    password: str = Field(min_length=6, max_length=72)
    role: Role = "student"

    model_config = {"str_strip_whitespace": True}


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class UserRoleUpdate(BaseModel):
    role: Role


class MessageOut(BaseModel):
    message: str
