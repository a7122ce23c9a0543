"""Content Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다.

공지/행사/자료는 모두 이 모듈의 함수를 ContentKind 설정과 함께 호출합니다.
댓글/좋아요/참가 신청은 문서 전체를 다시 쓰지 않고, 항목 하나에 한정된
조건부 INSERT/DELETE 한 번으로 반영합니다.
"""

import logging
from typing import List

from sqlalchemy import func, insert, literal, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from campus_portal.config import settings
from campus_portal.models.content import ContentComment, ContentItem, ContentLike, EventRegistration
from campus_portal.models.user import User
from campus_portal.schemas.content import CommentCreate
from campus_portal.services.content_kinds import ContentKind
from campus_portal.utils.errors import BusinessRuleError, NotAuthorizedError, NotFoundError
from campus_portal.utils.permissions import can_modify

logger = logging.getLogger(__name__)

REGISTRATION_LIMIT_REACHED = "Registration limit reached"
ALREADY_REGISTERED = "You are already registered for this event"
NOT_REGISTERED = "You are not registered for this event"
LIMIT_BELOW_ROSTER = "Registration limit cannot be lower than the number of registered users"


def _populate_options():
    return (
        selectinload(ContentItem.owner),
        selectinload(ContentItem.comments).selectinload(ContentComment.author),
        selectinload(ContentItem.liked_by),
        selectinload(ContentItem.registered_users),
    )


def _order_by(kind: ContentKind):
    column = getattr(ContentItem, kind.sort_column)
    if kind.sort_desc:
        return column.desc(), ContentItem.item_id.desc()
    return column.asc(), ContentItem.item_id.asc()


def _get_raw(db: Session, kind: ContentKind, item_id: int) -> ContentItem:
    item = (
        db.query(ContentItem)
        .filter(ContentItem.item_id == item_id, ContentItem.kind == kind.name)
        .first()
    )
    if not item:
        raise NotFoundError(kind.not_found_message())
    return item


def _ensure_exists(db: Session, kind: ContentKind, item_id: int) -> None:
    exists = (
        db.query(ContentItem.item_id)
        .filter(ContentItem.item_id == item_id, ContentItem.kind == kind.name)
        .first()
    )
    if not exists:
        raise NotFoundError(kind.not_found_message())


def load_populated(db: Session, item_id: int) -> ContentItem:
    """변경 직후 항목을 다시 읽어 작성자/댓글 작성자/좋아요/참가자를 채워 반환한다."""
    db.expire_all()
    item = (
        db.query(ContentItem)
        .options(*_populate_options())
        .filter(ContentItem.item_id == item_id)
        .first()
    )
    if not item:
        raise NotFoundError()
    return item


def list_items(db: Session, kind: ContentKind, skip: int = 0, limit: int | None = None) -> List[ContentItem]:
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else max(1, min(int(limit), settings.MAX_PAGE_SIZE))
    return (
        db.query(ContentItem)
        .options(*_populate_options())
        .filter(ContentItem.kind == kind.name)
        .order_by(*_order_by(kind))
        .offset(max(0, int(skip)))
        .limit(limit)
        .all()
    )


def get_item(db: Session, kind: ContentKind, item_id: int) -> ContentItem:
    _ensure_exists(db, kind, item_id)
    return load_populated(db, item_id)


def _columns_from(kind: ContentKind, payload: dict) -> dict:
    return {kind.column_map[key]: value for key, value in payload.items() if key in kind.column_map}


def create_item(db: Session, kind: ContentKind, data, current_user: User) -> ContentItem:
    values = _columns_from(kind, data.model_dump())
    item = ContentItem(kind=kind.name, owner_id=current_user.user_id, **values)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("[content] %s %s created by user %s", kind.name, item.item_id, current_user.user_id)
    return load_populated(db, item.item_id)


def update_item(db: Session, kind: ContentKind, item_id: int, data, current_user: User) -> ContentItem:
    item = _get_raw(db, kind, item_id)
    if not can_modify(item, current_user):
        raise NotAuthorizedError(f"Not authorized to update this {kind.noun}")
    values = _columns_from(kind, data.model_dump(exclude_none=True))
    next_limit = values.pop("registration_limit", None)
    if kind.has_registration and next_limit is not None:
        if not _apply_registration_limit(db, item_id, int(next_limit)):
            db.rollback()
            raise BusinessRuleError(LIMIT_BELOW_ROSTER)
    for column, value in values.items():
        setattr(item, column, value)
    db.commit()
    return load_populated(db, item_id)


def delete_item(db: Session, kind: ContentKind, item_id: int, current_user: User) -> None:
    item = _get_raw(db, kind, item_id)
    if not can_modify(item, current_user):
        raise NotAuthorizedError(f"Not authorized to delete this {kind.noun}")
    db.delete(item)
    db.commit()
    logger.info("[content] %s %s deleted by user %s", kind.name, item_id, current_user.user_id)


def add_comment(db: Session, kind: ContentKind, item_id: int, data: CommentCreate, current_user: User) -> ContentItem:
    _ensure_exists(db, kind, item_id)
    db.add(ContentComment(item_id=item_id, author_id=current_user.user_id, text=data.text))
    db.commit()
    return load_populated(db, item_id)


def toggle_like(db: Session, kind: ContentKind, item_id: int, current_user: User) -> ContentItem:
    if not kind.has_likes:
        raise NotFoundError(kind.not_found_message())
    _ensure_exists(db, kind, item_id)
    like_filter = (ContentLike.item_id == item_id, ContentLike.user_id == current_user.user_id)
    removed = db.query(ContentLike).filter(*like_filter).delete(synchronize_session=False)
    if not removed:
        db.add(ContentLike(item_id=item_id, user_id=current_user.user_id))
        try:
            db.flush()
        except IntegrityError:
            # 같은 사용자의 동시 토글이 먼저 반영됨: 두 번 토글한 것과 같게 취소로 처리
            db.rollback()
            logger.warning("[content] concurrent like toggle on %s %s by user %s", kind.name, item_id, current_user.user_id)
            db.query(ContentLike).filter(*like_filter).delete(synchronize_session=False)
    db.commit()
    return load_populated(db, item_id)


def _registered_count(item_id: int):
    return (
        select(func.count(EventRegistration.registration_id))
        .where(EventRegistration.item_id == item_id)
        .scalar_subquery()
    )


def _insert_registration(db: Session, item_id: int, user_id: int) -> int:
    """정원이 남아 있을 때만 참가 행을 추가한다. 추가된 행 수를 반환한다.

    정원은 INSERT 시점의 content_item 값으로 비교한다.
    """
    items = ContentItem.__table__
    current_limit = (
        select(func.coalesce(items.c.registration_limit, 0))
        .where(items.c.item_id == item_id)
        .scalar_subquery()
    )
    source = select(literal(item_id), literal(user_id)).where(
        or_(current_limit == 0, _registered_count(item_id) < current_limit)
    )
    stmt = insert(EventRegistration.__table__).from_select(["item_id", "user_id"], source)
    result = db.execute(stmt)
    return int(result.rowcount or 0)


def _apply_registration_limit(db: Session, item_id: int, registration_limit: int) -> int:
    """현재 참가자 수가 새 정원 이하일 때만 정원을 바꾼다. 0(제한 없음)은 항상 반영된다."""
    items = ContentItem.__table__
    stmt = update(items).where(items.c.item_id == item_id).values(registration_limit=registration_limit)
    if registration_limit > 0:
        stmt = stmt.where(_registered_count(item_id) <= registration_limit)
    result = db.execute(stmt)
    return int(result.rowcount or 0)


def register(db: Session, kind: ContentKind, item_id: int, current_user: User) -> ContentItem:
    if not kind.has_registration:
        raise NotFoundError(kind.not_found_message())
    event = _get_raw(db, kind, item_id)
    registration_limit = int(event.registration_limit or 0)
    registered_ids = [
        int(row[0])
        for row in db.query(EventRegistration.user_id).filter(EventRegistration.item_id == item_id).all()
    ]
    if registration_limit > 0 and len(registered_ids) >= registration_limit:
        raise BusinessRuleError(REGISTRATION_LIMIT_REACHED)
    if int(current_user.user_id) in registered_ids:
        raise BusinessRuleError(ALREADY_REGISTERED)
    try:
        inserted = _insert_registration(db, item_id, current_user.user_id)
    except IntegrityError:
        db.rollback()
        raise BusinessRuleError(ALREADY_REGISTERED)
    if not inserted:
        # 사전 확인과 INSERT 사이에 다른 신청이 정원을 채움
        db.rollback()
        logger.warning("[content] registration for event %s rejected at write time: full", item_id)
        raise BusinessRuleError(REGISTRATION_LIMIT_REACHED)
    db.commit()
    return load_populated(db, item_id)


def cancel_registration(db: Session, kind: ContentKind, item_id: int, current_user: User) -> ContentItem:
    if not kind.has_registration:
        raise NotFoundError(kind.not_found_message())
    _ensure_exists(db, kind, item_id)
    removed = (
        db.query(EventRegistration)
        .filter(EventRegistration.item_id == item_id, EventRegistration.user_id == current_user.user_id)
        .delete(synchronize_session=False)
    )
    if not removed:
        db.rollback()
        raise BusinessRuleError(NOT_REGISTERED)
    db.commit()
    return load_populated(db, item_id)
