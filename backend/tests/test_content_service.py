"""content_service 일반화 로직을 HTTP 계층 없이 직접 검증하는 테스트입니다."""

import logging

import pytest
from sqlalchemy import insert
from sqlalchemy.event import listen

from campus_portal.models.content import ContentItem, ContentLike, EventRegistration
from campus_portal.schemas.content import AnnouncementCreate, AnnouncementUpdate, CommentCreate, EventCreate, EventUpdate
from campus_portal.services import content_service
from campus_portal.services.content_kinds import ANNOUNCEMENT, EVENT, RESOURCE
from campus_portal.utils.errors import BusinessRuleError, NotAuthorizedError, NotFoundError
from campus_portal.utils.permissions import can_modify
from tests.conftest import TestingSession


def _announcement(db, owner):
    return content_service.create_item(db, ANNOUNCEMENT, AnnouncementCreate(title="t", description="d"), owner)


def _event(db, owner, limit):
    data = EventCreate(
        title="Hackathon",
        description="24h",
        date="2026-11-30T09:00:00",
        location="Lab",
        registration_limit=limit,
    )
    return content_service.create_item(db, EVENT, data, owner)


def test_can_modify_owner_admin_and_other(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    assert can_modify(item, seed_users["faculty"])
    assert can_modify(item, seed_users["admin"])
    assert not can_modify(item, seed_users["student"])


def test_owner_is_invariant_across_updates(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    owner_id = item.owner_id
    created_at = item.created_at
    for editor, title in ((seed_users["faculty"], "one"), (seed_users["admin"], "two")):
        item = content_service.update_item(db, ANNOUNCEMENT, item.item_id, AnnouncementUpdate(title=title), editor)
        assert item.owner_id == owner_id
        assert item.created_at == created_at
    with pytest.raises(NotAuthorizedError):
        content_service.update_item(db, ANNOUNCEMENT, item.item_id, AnnouncementUpdate(title="x"), seed_users["student"])
    assert content_service.get_item(db, ANNOUNCEMENT, item.item_id).title == "two"


def test_toggle_like_is_its_own_inverse(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    content_service.toggle_like(db, ANNOUNCEMENT, item.item_id, seed_users["admin"])
    before = [u.user_id for u in content_service.get_item(db, ANNOUNCEMENT, item.item_id).liked_by]

    content_service.toggle_like(db, ANNOUNCEMENT, item.item_id, seed_users["student"])
    after = content_service.toggle_like(db, ANNOUNCEMENT, item.item_id, seed_users["student"])
    assert [u.user_id for u in after.liked_by] == before


def test_comment_count_is_monotonic(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    counts = []
    for n in range(3):
        item = content_service.add_comment(
            db, ANNOUNCEMENT, item.item_id, CommentCreate(text=f"c{n}"), seed_users["student"]
        )
        counts.append(len(item.comments))
    assert counts == [1, 2, 3]
    assert [c.text for c in item.comments] == ["c2", "c1", "c0"]


def test_kind_mismatch_is_not_found(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    with pytest.raises(NotFoundError):
        content_service.get_item(db, RESOURCE, item.item_id)
    with pytest.raises(NotFoundError):
        content_service.register(db, EVENT, item.item_id, seed_users["student"])


def test_nth_plus_one_registration_fails_and_roster_unchanged(db, seed_users):
    event = _event(db, seed_users["faculty"], limit=2)
    content_service.register(db, EVENT, event.item_id, seed_users["student"])
    content_service.register(db, EVENT, event.item_id, seed_users["student2"])

    with pytest.raises(BusinessRuleError) as exc:
        content_service.register(db, EVENT, event.item_id, seed_users["admin"])
    assert exc.value.detail == content_service.REGISTRATION_LIMIT_REACHED

    roster = content_service.get_item(db, EVENT, event.item_id).registered_users
    assert [u.user_id for u in roster] == [seed_users["student"].user_id, seed_users["student2"].user_id]


def test_conditional_insert_refuses_when_full(db, seed_users):
    event = _event(db, seed_users["faculty"], limit=1)
    db.add(EventRegistration(item_id=event.item_id, user_id=seed_users["student"].user_id))
    db.commit()

    inserted = content_service._insert_registration(db, event.item_id, seed_users["student2"].user_id)
    db.commit()
    assert inserted == 0
    assert db.query(EventRegistration).filter(EventRegistration.item_id == event.item_id).count() == 1


def test_conditional_insert_without_limit(db, seed_users):
    event = _event(db, seed_users["faculty"], limit=0)
    inserted = content_service._insert_registration(db, event.item_id, seed_users["student"].user_id)
    db.commit()
    assert inserted == 1


def test_register_then_cancel_restores_roster(db, seed_users):
    event = _event(db, seed_users["faculty"], limit=0)
    content_service.register(db, EVENT, event.item_id, seed_users["student"])
    content_service.register(db, EVENT, event.item_id, seed_users["admin"])
    before = [u.user_id for u in content_service.get_item(db, EVENT, event.item_id).registered_users]

    content_service.register(db, EVENT, event.item_id, seed_users["student2"])
    after = content_service.cancel_registration(db, EVENT, event.item_id, seed_users["student2"])
    assert [u.user_id for u in after.registered_users] == before


def test_load_populated_resolves_relations(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    db.expunge_all()
    loaded = content_service.load_populated(db, item.item_id)
    assert isinstance(loaded, ContentItem)
    assert loaded.owner.email == "faculty@campus.edu"


def test_delete_by_stranger_leaves_item(db, seed_users):
    item = _announcement(db, seed_users["faculty"])
    with pytest.raises(NotAuthorizedError):
        content_service.delete_item(db, ANNOUNCEMENT, item.item_id, seed_users["student"])
    assert content_service.get_item(db, ANNOUNCEMENT, item.item_id).item_id == item.item_id


def _commit_registration_elsewhere(item_id, user_id):
    """다른 요청(별도 세션)이 참가 신청을 먼저 커밋한 상황을 만든다."""
    other = TestingSession()
    try:
        other.add(EventRegistration(item_id=item_id, user_id=user_id))
        other.commit()
    finally:
        other.close()


def _roster(db, item_id):
    return [u.user_id for u in content_service.get_item(db, EVENT, item_id).registered_users]


def test_lowering_limit_refused_when_registration_lands_first(db, seed_users, monkeypatch):
    event = _event(db, seed_users["faculty"], limit=5)
    content_service.register(db, EVENT, event.item_id, seed_users["student"])
    latecomer_id = seed_users["student2"].user_id
    apply_limit = content_service._apply_registration_limit

    def registration_races_in(session, item_id, registration_limit):
        _commit_registration_elsewhere(item_id, latecomer_id)
        return apply_limit(session, item_id, registration_limit)

    monkeypatch.setattr(content_service, "_apply_registration_limit", registration_races_in)
    with pytest.raises(BusinessRuleError) as exc:
        content_service.update_item(db, EVENT, event.item_id, EventUpdate(registration_limit=1), seed_users["faculty"])
    assert exc.value.detail == content_service.LIMIT_BELOW_ROSTER

    reloaded = content_service.get_item(db, EVENT, event.item_id)
    assert reloaded.registration_limit == 5
    assert len(reloaded.registered_users) == 2


def test_conditional_limit_update_counts_roster_at_write_time(db, seed_users):
    event = _event(db, seed_users["faculty"], limit=0)
    for key in ("student", "student2"):
        content_service.register(db, EVENT, event.item_id, seed_users[key])

    assert content_service._apply_registration_limit(db, event.item_id, 1) == 0
    assert content_service._apply_registration_limit(db, event.item_id, 2) == 1
    db.commit()
    assert content_service.get_item(db, EVENT, event.item_id).registration_limit == 2


def test_register_conflict_at_write_time_is_already_registered(db, seed_users, monkeypatch):
    event = _event(db, seed_users["faculty"], limit=0)
    student_id = seed_users["student"].user_id
    insert_registration = content_service._insert_registration

    def same_user_commits_first(session, item_id, user_id):
        _commit_registration_elsewhere(item_id, user_id)
        return insert_registration(session, item_id, user_id)

    monkeypatch.setattr(content_service, "_insert_registration", same_user_commits_first)
    with pytest.raises(BusinessRuleError) as exc:
        content_service.register(db, EVENT, event.item_id, seed_users["student"])
    assert exc.value.detail == content_service.ALREADY_REGISTERED
    assert _roster(db, event.item_id) == [student_id]


def test_register_rejected_when_last_seat_taken_at_write_time(db, seed_users, monkeypatch, caplog):
    event = _event(db, seed_users["faculty"], limit=1)
    competitor_id = seed_users["student2"].user_id
    insert_registration = content_service._insert_registration

    def competitor_takes_last_seat(session, item_id, user_id):
        _commit_registration_elsewhere(item_id, competitor_id)
        return insert_registration(session, item_id, user_id)

    monkeypatch.setattr(content_service, "_insert_registration", competitor_takes_last_seat)
    with caplog.at_level(logging.WARNING, logger="campus_portal.services.content_service"):
        with pytest.raises(BusinessRuleError) as exc:
            content_service.register(db, EVENT, event.item_id, seed_users["student"])
    assert exc.value.detail == content_service.REGISTRATION_LIMIT_REACHED
    assert "rejected at write time" in caplog.text
    assert _roster(db, event.item_id) == [competitor_id]


def test_concurrent_like_by_same_user_resolves_as_unlike(db, seed_users, caplog):
    item = _announcement(db, seed_users["faculty"])
    item_id = item.item_id
    student_id = seed_users["student"].user_id

    def same_user_likes_first(session, flush_context, instances):
        session.connection().execute(
            insert(ContentLike.__table__).values(item_id=item_id, user_id=student_id)
        )

    listen(db, "before_flush", same_user_likes_first, once=True)
    with caplog.at_level(logging.WARNING, logger="campus_portal.services.content_service"):
        result = content_service.toggle_like(db, ANNOUNCEMENT, item_id, seed_users["student"])
    assert "concurrent like toggle" in caplog.text
    assert result.liked_by == []
    assert db.query(ContentLike).filter(ContentLike.item_id == item_id).count() == 0
