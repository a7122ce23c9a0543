"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from campus_portal.models.user import User, UserSession
from campus_portal.models.content import ContentItem, ContentComment, ContentLike, EventRegistration

__all__ = [
    "User", "UserSession",
    "ContentItem", "ContentComment", "ContentLike", "EventRegistration",
]
