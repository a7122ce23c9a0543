"""공지/행사/자료 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다.

세 종류의 라우터는 build_content_router 하나로 만들고, 좋아요/참가 신청 경로는
ContentKind 설정이 허용할 때만 등록합니다.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from campus_portal.database import get_db
from campus_portal.schemas.content import CommentCreate
from campus_portal.schemas.user import MessageOut
from campus_portal.services import content_service
from campus_portal.services.content_kinds import ContentKind
from campus_portal.middleware.auth_middleware import get_current_user
from campus_portal.models.user import User


def build_content_router(kind: ContentKind) -> APIRouter:
    router = APIRouter(prefix=kind.prefix, tags=[kind.prefix.rsplit("/", 1)[-1]])
    CreateSchema = kind.create_schema
    UpdateSchema = kind.update_schema
    OutSchema = kind.out_schema

    @router.get("", response_model=List[OutSchema])
    def list_items(
        skip: int = Query(0, ge=0),
        limit: int | None = Query(None, ge=1),
        db: Session = Depends(get_db),
    ):
        return content_service.list_items(db, kind, skip, limit)

    @router.get("/{item_id}", response_model=OutSchema)
    def get_item(item_id: int, db: Session = Depends(get_db)):
        return content_service.get_item(db, kind, item_id)

    @router.post("", response_model=OutSchema, status_code=status.HTTP_201_CREATED)
    def create_item(
        data: CreateSchema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        return content_service.create_item(db, kind, data, current_user)

    @router.put("/{item_id}", response_model=OutSchema)
    def update_item(
        item_id: int,
        data: UpdateSchema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        return content_service.update_item(db, kind, item_id, data, current_user)

    @router.delete("/{item_id}", response_model=MessageOut)
    def delete_item(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
        content_service.delete_item(db, kind, item_id, current_user)
        return {"message": f"{kind.label} deleted successfully"}

    @router.post("/{item_id}/comments", response_model=OutSchema)
    def add_comment(
        item_id: int,
        data: CommentCreate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        return content_service.add_comment(db, kind, item_id, data, current_user)

    if kind.has_likes:
        @router.post("/{item_id}/like", response_model=OutSchema)
        def toggle_like(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
            return content_service.toggle_like(db, kind, item_id, current_user)

    if kind.has_registration:
        @router.post("/{item_id}/register", response_model=OutSchema)
        def register(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
            return content_service.register(db, kind, item_id, current_user)

        @router.post("/{item_id}/cancel", response_model=OutSchema)
        def cancel_registration(
            item_id: int,
            db: Session = Depends(get_db),
            current_user: User = Depends(get_current_user),
        ):
            return content_service.cancel_registration(db, kind, item_id, current_user)

    return router
