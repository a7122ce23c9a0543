"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from campus_portal.models.user import User
from campus_portal.models.content import ContentItem


ADMIN = "admin"
FACULTY = "faculty"
STUDENT = "student"

SELF_REGISTER_ROLES = (STUDENT, FACULTY)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_owner(item: ContentItem, user: User) -> bool:
    return item.owner_id is not None and int(item.owner_id) == int(user.user_id)


def can_modify(item: ContentItem, user: User) -> bool:
    """작성자 본인 또는 관리자만 수정/삭제할 수 있다."""
    return is_owner(item, user) or is_admin(user)
