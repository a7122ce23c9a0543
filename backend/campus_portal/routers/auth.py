"""Auth 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from campus_portal.database import get_db
from campus_portal.schemas.user import LoginRequest, MessageOut, RegisterRequest, TokenResponse, UserOut
from campus_portal.services import auth_service
from campus_portal.middleware.auth_middleware import get_current_session, get_current_user
from campus_portal.models.user import User, UserSession

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    user = auth_service.register_user(db, request)
    token = auth_service.open_session(db, user)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, request)
    token = auth_service.open_session(db, user)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/logout", response_model=MessageOut)
def logout(session: UserSession = Depends(get_current_session), db: Session = Depends(get_db)):
    auth_service.close_session(db, session)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
