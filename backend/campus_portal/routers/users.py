"""Users 기능 API 라우터입니다. 관리자 전용 사용자 조회/권한 변경을 제공합니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from campus_portal.database import get_db
from campus_portal.schemas.user import UserOut, UserRoleUpdate
from campus_portal.services import user_service
from campus_portal.middleware.auth_middleware import require_roles
from campus_portal.models.user import User
from campus_portal.utils.permissions import ADMIN

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_roles(ADMIN)),
):
    return user_service.get_users(db, skip, limit)


@router.patch("/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: int,
    data: UserRoleUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_roles(ADMIN)),
):
    return user_service.update_role(db, user_id, data.role)
