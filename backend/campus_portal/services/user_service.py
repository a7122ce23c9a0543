"""User Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from typing import List
from sqlalchemy.orm import Session
from campus_portal.models.user import User
from campus_portal.utils.errors import NotFoundError


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.user_id.asc()).offset(skip).limit(limit).all()


def update_role(db: Session, user_id: int, role: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    user.role = role
    db.commit()
    db.refresh(user)
    return user
