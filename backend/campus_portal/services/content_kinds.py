"""콘텐츠 종류(공지/행사/자료)별 설정입니다.

세 종류는 하나의 content_service 구현을 공유하고, 차이는 이 설정으로만 표현합니다.
"""

from dataclasses import dataclass, field
from typing import Dict, Type

from pydantic import BaseModel

from campus_portal.schemas.content import (
    AnnouncementCreate,
    AnnouncementOut,
    AnnouncementUpdate,
    EventCreate,
    EventOut,
    EventUpdate,
    ResourceCreate,
    ResourceOut,
    ResourceUpdate,
)


@dataclass(frozen=True)
class ContentKind:
    name: str
    label: str
    prefix: str
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    out_schema: Type[BaseModel]
    # 요청 필드명 -> ContentItem 컬럼명 (title/description 외 종류별 필드)
    extra_fields: Dict[str, str] = field(default_factory=dict)
    sort_column: str = "created_at"
    sort_desc: bool = True
    has_likes: bool = False
    has_registration: bool = False

    @property
    def noun(self) -> str:
        return self.label.lower()

    @property
    def column_map(self) -> Dict[str, str]:
        return {"title": "title", "description": "description", **self.extra_fields}

    def not_found_message(self) -> str:
        return f"{self.label} not found"


ANNOUNCEMENT = ContentKind(
    name="announcement",
    label="Announcement",
    prefix="/api/announcements",
    create_schema=AnnouncementCreate,
    update_schema=AnnouncementUpdate,
    out_schema=AnnouncementOut,
    has_likes=True,
)

EVENT = ContentKind(
    name="event",
    label="Event",
    prefix="/api/events",
    create_schema=EventCreate,
    update_schema=EventUpdate,
    out_schema=EventOut,
    extra_fields={"date": "event_date", "location": "location", "registration_limit": "registration_limit"},
    sort_column="event_date",
    sort_desc=False,
    has_registration=True,
)

RESOURCE = ContentKind(
    name="resource",
    label="Resource",
    prefix="/api/resources",
    create_schema=ResourceCreate,
    update_schema=ResourceUpdate,
    out_schema=ResourceOut,
    extra_fields={"file_url": "file_url", "category": "category"},
    has_likes=True,
)

CONTENT_KINDS = (ANNOUNCEMENT, EVENT, RESOURCE)
