"""Auth Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다.

로그인 시 UserSession을 만들고 그 id를 JWT jti로 싣습니다. 요청마다 세션을 확인하고,
로그아웃하거나 만료되면 세션이 더 이상 유효하지 않습니다.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from campus_portal.config import settings
from campus_portal.models.user import User, UserSession
from campus_portal.schemas.user import LoginRequest, RegisterRequest
from campus_portal.utils.errors import AuthenticationError, BusinessRuleError
from campus_portal.utils.permissions import SELF_REGISTER_ROLES

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _utcnow() -> datetime:
    # DB에는 naive UTC로 저장한다.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user: User, session_id: str, expires_at: datetime) -> str:
    payload = {
        "sub": str(user.user_id),
        "role": user.role,
        "jti": session_id,
        "exp": expires_at.replace(tzinfo=timezone.utc),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")


def open_session(db: Session, user: User) -> str:
    expires_at = _utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    session = UserSession(session_id=secrets.token_hex(16), user_id=user.user_id, expires_at=expires_at)
    db.add(session)
    db.commit()
    return create_access_token(user, session.session_id, expires_at)


def resolve_session(db: Session, token: str) -> tuple[User, UserSession]:
    payload = decode_token(token)
    user_id = payload.get("sub")
    session_id = payload.get("jti")
    if user_id is None or session_id is None:
        raise AuthenticationError("Invalid token payload")

    session = db.query(UserSession).filter(UserSession.session_id == str(session_id)).first()
    if not session or session.revoked_at is not None:
        raise AuthenticationError("Session has ended")
    if session.expires_at <= _utcnow():
        raise AuthenticationError("Session has expired")
    if int(session.user_id) != int(user_id):
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.user_id == int(user_id), User.is_active == True).first()  # noqa: E712
    if not user:
        raise AuthenticationError("User not found or inactive")
    return user, session


def close_session(db: Session, session: UserSession) -> None:
    if session.revoked_at is None:
        session.revoked_at = _utcnow()
        db.commit()
        logger.info("[auth] session %s revoked for user %s", session.session_id, session.user_id)


def register_user(db: Session, data: RegisterRequest) -> User:
    if data.role not in SELF_REGISTER_ROLES:
        raise BusinessRuleError("Cannot self-register with this role")
    email = data.email.lower()
    if db.query(User.user_id).filter(User.email == email).first():
        raise BusinessRuleError("User already exists")
    user = User(
        name=data.name,
        email=email,
        password_hash=hash_password(data.password),
        role=data.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("[auth] user %s registered as %s", user.user_id, user.role)
    return user


def authenticate(db: Session, data: LoginRequest) -> User:
    email = data.email.strip().lower()
    user = db.query(User).filter(User.email == email, User.is_active == True).first()  # noqa: E712
    if not user or not verify_password(data.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user
