# storyshare/services/auth.py
"""
Регистрация, вход/выход и проверка сессий.
- hash_password / verify_password: PBKDF2-HMAC-SHA512, формат "salt:hash" (hex)
- AuthService: работа с пользователями и сессиями поверх Storage
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import secrets
from typing import Callable, Optional

from sqlalchemy.orm import Session

from storyshare.constants import SESSION_DURATION
from storyshare.db import Storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.session import UserSession
from storyshare.models.user import User
from storyshare.utils.clock import utcnow

log = logging.getLogger(__name__)

HASH_ITERATIONS = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))
HASH_KEY_LENGTH = 64
HASH_SALT_LENGTH = 32
HASH_DIGEST = "sha512"


def hash_password(password: str) -> str:
    """Соль генерируется заново на каждый вызов: один пароль -> разные строки."""
    salt = secrets.token_hex(HASH_SALT_LENGTH)
    derived = hashlib.pbkdf2_hmac(
        HASH_DIGEST, password.encode("utf-8"), salt.encode("utf-8"), HASH_ITERATIONS, HASH_KEY_LENGTH
    )
    return f"{salt}:{derived.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    salt, sep, expected = (stored_hash or "").partition(":")
    if not sep or not salt or not expected:
        return False
    derived = hashlib.pbkdf2_hmac(
        HASH_DIGEST, password.encode("utf-8"), salt.encode("utf-8"), HASH_ITERATIONS, HASH_KEY_LENGTH
    )
    return hmac.compare_digest(derived.hex(), expected)


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _normalize_username(username: Optional[str]) -> str:
    return (username or "").strip()


def _find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def _find_user_by_username(db: Session, username: str) -> Optional[User]:
    key = _normalize_username(username).lower()
    return db.query(User).filter(User.username_key == key).first()


class AuthService:
    def __init__(self, storage: Storage, clock: Callable = utcnow):
        self.storage = storage
        self.clock = clock

    def register(self, email: str, username: str, password: str) -> User:
        email_n = _normalize_email(email)
        username_n = _normalize_username(username)
        if not email_n or not username_n or not password:
            raise ServiceError(ErrorCode.VALIDATION_ERROR, "Email, username, and password are required")

        with self.storage.session() as db:
            if _find_user_by_email(db, email_n):
                raise ServiceError(ErrorCode.DUPLICATE_EMAIL)
            if _find_user_by_username(db, username_n):
                raise ServiceError(ErrorCode.DUPLICATE_USERNAME)

            user = User(
                email=email_n,
                username=username_n,
                username_key=username_n.lower(),
                password_hash=hash_password(password),
                created_at=self.clock(),
            )
            db.add(user)
            db.flush()

        log.info("user registered id=%s username=%s", user.id, user.username)
        return user

    def login(self, email: str, password: str) -> UserSession:
        with self.storage.session() as db:
            user = _find_user_by_email(db, email)
            # Обе ветки отказа неразличимы для вызывающего
            if not user or not verify_password(password or "", user.password_hash):
                log.info("login failed")
                raise ServiceError(ErrorCode.INVALID_CREDENTIALS)

            session = UserSession(
                user_id=user.id,
                token=secrets.token_hex(32),
                expires_at=self.clock() + SESSION_DURATION,
            )
            db.add(session)
            db.flush()

        log.info("user logged in id=%s session=%s", user.id, session.id)
        return session

    def logout(self, session_id: str) -> None:
        with self.storage.session() as db:
            session = db.get(UserSession, session_id) if session_id else None
            if not session:
                raise ServiceError(ErrorCode.INVALID_SESSION)
            db.delete(session)

    def get_session_by_token(self, token: str) -> Optional[UserSession]:
        if not token:
            return None
        with self.storage.session() as db:
            return db.query(UserSession).filter(UserSession.token == token).first()

    def validate_session(self, session_id: str) -> Optional[User]:
        if not session_id:
            return None
        with self.storage.session() as db:
            return self._resolve(db, db.get(UserSession, session_id))

    def validate_session_by_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        with self.storage.session() as db:
            session = db.query(UserSession).filter(UserSession.token == token).first()
            return self._resolve(db, session)

    def _resolve(self, db: Session, session: Optional[UserSession]) -> Optional[User]:
        """
        Ленивое истечение: просроченную сессию удаляем прямо при чтении.
        Фонового чистильщика нет.
        """
        if not session:
            return None
        if self.clock() > session.expires_at:
            log.debug("session expired id=%s user=%s", session.id, session.user_id)
            db.delete(session)
            return None
        return db.get(User, session.user_id)
