# storyshare/routers/auth.py
"""
Роутер авторизации: регистрация, вход по email/паролю, выход, текущий пользователь.
Ошибки AuthService (ServiceError) превращаются в HTTP-ответы обработчиком из main.py.
"""

from fastapi import APIRouter, Depends, Request

from storyshare.db import Storage, get_storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.user import User
from storyshare.schemas.user import SessionOut, UserCreate, UserLogin, UserOut
from storyshare.services.auth import AuthService
from storyshare.utils.auth_dep import get_bearer_token, get_current_user

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: UserCreate, storage: Storage = Depends(get_storage)):
    return AuthService(storage).register(payload.email, payload.username, payload.password)


@router.post("/login", response_model=SessionOut)
def login(payload: UserLogin, storage: Storage = Depends(get_storage)):
    """Возвращает {token, expiresAt}; токен дальше идёт в Authorization: Bearer <token>."""
    return AuthService(storage).login(payload.email, payload.password)


@router.post("/logout", response_model=dict)
def logout(request: Request, storage: Storage = Depends(get_storage)):
    token = get_bearer_token(request)
    if not token:
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Authorization token required")

    auth = AuthService(storage)
    session = auth.get_session_by_token(token)
    if not session:
        raise ServiceError(ErrorCode.INVALID_SESSION)
    auth.logout(session.id)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
