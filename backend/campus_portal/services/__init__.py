"""서비스 레이어 패키지 초기화 모듈입니다."""

from campus_portal.services import (
    auth_service,
    content_service,
    user_service,
)
