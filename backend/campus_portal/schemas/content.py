"""공지/행사/자료 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from campus_portal.schemas.user import LikeUserRef, UserRef

TEXT_FIELD = {"str_strip_whitespace": True}


class CommentCreate(BaseModel):
    text: str = Field(min_length=1, max_length=2000)

    model_config = TEXT_FIELD


class CommentOut(BaseModel):
    id: int = Field(validation_alias="comment_id")
    text: str
    created_by: UserRef = Field(validation_alias="author")
    created_at: datetime

    model_config = {"from_attributes": True}


# -- 공통 --------------------------------------------------------------------

class ContentBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)

    model_config = TEXT_FIELD


class ContentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)

    model_config = TEXT_FIELD


class ContentOut(BaseModel):
    id: int = Field(validation_alias="item_id")
    title: str
    description: str
    comments: List[CommentOut] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# -- 공지사항 -----------------------------------------------------------------

class AnnouncementCreate(ContentBase):
    pass


class AnnouncementUpdate(ContentUpdate):
    pass


class AnnouncementOut(ContentOut):
    created_by: UserRef = Field(validation_alias="owner")
    likes: List[LikeUserRef] = Field([], validation_alias="liked_by")


# -- 행사 ---------------------------------------------------------------------

class EventCreate(ContentBase):
    date: datetime
    location: str = Field(min_length=1, max_length=200)
    registration_limit: int = Field(0, ge=0)


class EventUpdate(ContentUpdate):
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    registration_limit: Optional[int] = Field(None, ge=0)


class EventOut(ContentOut):
    date: datetime = Field(validation_alias="event_date")
    location: str
    registration_limit: int
    created_by: UserRef = Field(validation_alias="owner")
    registered_users: List[UserRef] = []


# -- 자료실 -------------------------------------------------------------------

class ResourceCreate(ContentBase):
    file_url: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1, max_length=100)


class ResourceUpdate(ContentUpdate):
    file_url: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)


class ResourceOut(ContentOut):
    file_url: str
    category: str
    uploaded_by: UserRef = Field(validation_alias="owner")
    likes: List[LikeUserRef] = Field([], validation_alias="liked_by")
