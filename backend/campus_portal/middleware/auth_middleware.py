from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from campus_portal.database import get_db
from campus_portal.models.user import User, UserSession
from campus_portal.services.auth_service import resolve_session
from campus_portal.utils.errors import AuthenticationError

security = HTTPBearer(auto_error=False)


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> UserSession:
    if credentials is None:
        raise AuthenticationError("No token, authorization denied")
    _user, session = resolve_session(db, credentials.credentials)
    return session


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise AuthenticationError("No token, authorization denied")
    user, _session = resolve_session(db, credentials.credentials)
    return user


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker
