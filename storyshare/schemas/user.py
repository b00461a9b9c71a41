# storyshare/schemas/user.py

from pydantic import BaseModel

from storyshare.schemas.common import CamelModel, UtcDatetime


class UserCreate(BaseModel):
    # Пустые строки не режем здесь: проверку делает AuthService (VALIDATION_ERROR)
    email: str
    username: str
    password: str


class UserLogin(BaseModel):
    email: str
    password: str


class UserOut(CamelModel):
    """Публичный профиль: без password_hash."""
    id: str
    email: str
    username: str
    created_at: UtcDatetime


class SessionOut(CamelModel):
    token: str
    expires_at: UtcDatetime
