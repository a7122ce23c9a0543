"""공지/행사/자료를 하나로 일반화한 콘텐츠 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from campus_portal.database import Base


class ContentItem(Base):
    __tablename__ = "content_item"

    item_id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(20), nullable=False)  # announcement/event/resource
    owner_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    # resource
    file_url = Column(String(500))
    category = Column(String(100))
    # event
    event_date = Column(DateTime)
    location = Column(String(200))
    registration_limit = Column(Integer, default=0)  # 0 = 제한 없음
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    owner = relationship("User", back_populates="content_items")
    comments = relationship(
        "ContentComment",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by=lambda: [ContentComment.created_at.desc(), ContentComment.comment_id.desc()],
    )
    like_rows = relationship("ContentLike", back_populates="item", cascade="all, delete-orphan")
    registrations = relationship("EventRegistration", back_populates="item", cascade="all, delete-orphan")

    # 응답용 조회 전용 관계. 변경은 like_rows/registrations 행 단위로만 한다.
    liked_by = relationship(
        "User",
        secondary="content_like",
        order_by="ContentLike.like_id",
        viewonly=True,
    )
    registered_users = relationship(
        "User",
        secondary="event_registration",
        order_by="EventRegistration.registration_id",
        viewonly=True,
    )

    __table_args__ = (
        Index("idx_content_kind_created", "kind", "created_at"),
        Index("idx_content_kind_event_date", "kind", "event_date"),
    )


class ContentComment(Base):
    __tablename__ = "content_comment"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey("content_item.item_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    item = relationship("ContentItem", back_populates="comments")
    author = relationship("User", back_populates="comments")

    __table_args__ = (
        Index("idx_content_comment_item", "item_id"),
    )


class ContentLike(Base):
    __tablename__ = "content_like"

    like_id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey("content_item.item_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    item = relationship("ContentItem", back_populates="like_rows")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_content_like_item_user"),
        Index("idx_content_like_item", "item_id"),
    )


class EventRegistration(Base):
    __tablename__ = "event_registration"

    registration_id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey("content_item.item_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    registered_at = Column(DateTime, server_default=func.now())

    item = relationship("ContentItem", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_event_registration_item_user"),
        Index("idx_event_registration_item", "item_id"),
    )
