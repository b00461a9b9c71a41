# storyshare/utils/auth_dep.py
"""
Авторизация по Bearer-токену сессии.
- get_bearer_token: достаёт токен из заголовка Authorization
- get_current_user: FastAPI-зависимость для защищённых ручек (401, если не вошли)
- get_optional_user: то же, но анонима пропускает как None
"""

from typing import Optional

from fastapi import Depends, Request

from storyshare.db import Storage, get_storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.user import User
from storyshare.services.auth import AuthService

_BEARER = "bearer "


def get_bearer_token(request: Request) -> Optional[str]:
    header_v = request.headers.get("authorization") or ""
    if not header_v.lower().startswith(_BEARER):
        return None
    token = header_v[len(_BEARER):].strip()
    return token or None


def get_optional_user(request: Request, storage: Storage = Depends(get_storage)) -> Optional[User]:
    token = get_bearer_token(request)
    if not token:
        return None
    return AuthService(storage).validate_session_by_token(token)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if not user:
        raise ServiceError(ErrorCode.UNAUTHORIZED)
    return user
