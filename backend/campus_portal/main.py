"""FastAPI 애플리케이션 진입점. 로깅, 미들웨어, 예외 핸들러, API 라우터를 등록합니다."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from campus_portal.config import settings
from campus_portal.database import Base, engine
import campus_portal.models  # noqa: F401 - 모델 import로 metadata 등록
from campus_portal.routers import auth, users
from campus_portal.routers.content import build_content_router
from campus_portal.services.content_kinds import CONTENT_KINDS
from campus_portal.utils.errors import register_exception_handlers


def configure_logging() -> int:
    """DEBUG이면 root 로그 레벨을 DEBUG로 낮추고, 아니면 LOG_LEVEL을 따른다."""
    if settings.DEBUG:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)
    # SQL 문장 로그(echo)는 DEBUG 모드에서도 끈다
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return level


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Campus Portal API",
    description="공지사항, 행사, 자료실과 댓글/좋아요/참가 신청을 제공하는 캠퍼스 포털 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register all routers
app.include_router(auth.router)
app.include_router(users.router)
for kind in CONTENT_KINDS:
    app.include_router(build_content_router(kind))


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)
    logger.info("[startup] schema ready (%s)", engine.url.get_backend_name())


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Campus Portal API"}
