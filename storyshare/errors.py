# storyshare/errors.py
# -----------------------------------------------------------------------------
# Единый закрытый набор ошибок сервисного слоя.
#   • ErrorCode — стабильный машинный код + подсказка HTTP-статуса.
#   • ServiceError — одно исключение на всё; ветвимся по err.code, а не по классам.
# Статус ядро не интерпретирует: его использует только HTTP-слой (main.py).
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
from typing import Optional


class ErrorCode(str, enum.Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Авторизация
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_SESSION = "INVALID_SESSION"

    # Посты
    UNAUTHORIZED = "UNAUTHORIZED"
    ACCESS_DENIED = "ACCESS_DENIED"
    EMPTY_CONTENT = "EMPTY_CONTENT"
    INVALID_FORMAT = "INVALID_FORMAT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    POST_NOT_FOUND = "POST_NOT_FOUND"

    # Друзья
    SELF_FRIEND_REQUEST = "SELF_FRIEND_REQUEST"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    NOT_FRIENDS = "NOT_FRIENDS"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    @property
    def status_code(self) -> int:
        return _STATUS[self]

    @property
    def default_message(self) -> str:
        return _MESSAGES[self]


_STATUS = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.DUPLICATE_EMAIL: 409,
    ErrorCode.DUPLICATE_USERNAME: 409,
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.INVALID_SESSION: 401,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.ACCESS_DENIED: 403,
    ErrorCode.EMPTY_CONTENT: 400,
    ErrorCode.INVALID_FORMAT: 400,
    ErrorCode.FILE_TOO_LARGE: 413,
    ErrorCode.POST_NOT_FOUND: 404,
    ErrorCode.SELF_FRIEND_REQUEST: 400,
    ErrorCode.DUPLICATE_REQUEST: 409,
    ErrorCode.REQUEST_NOT_FOUND: 404,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FRIENDS: 400,
    ErrorCode.USER_NOT_FOUND: 404,
}

_MESSAGES = {
    ErrorCode.VALIDATION_ERROR: "Invalid request",
    ErrorCode.DUPLICATE_EMAIL: "Email already registered",
    ErrorCode.DUPLICATE_USERNAME: "Username already taken",
    ErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorCode.INVALID_SESSION: "Invalid session token",
    ErrorCode.UNAUTHORIZED: "Authentication required",
    ErrorCode.ACCESS_DENIED: "You do not have access to this post",
    ErrorCode.EMPTY_CONTENT: "Content cannot be empty",
    ErrorCode.INVALID_FORMAT: "Unsupported file format",
    ErrorCode.FILE_TOO_LARGE: "File exceeds maximum size",
    ErrorCode.POST_NOT_FOUND: "Post not found",
    ErrorCode.SELF_FRIEND_REQUEST: "Cannot send friend request to yourself",
    ErrorCode.DUPLICATE_REQUEST: "Friend request already exists",
    ErrorCode.REQUEST_NOT_FOUND: "Friend request not found",
    ErrorCode.FORBIDDEN: "Access denied",
    ErrorCode.NOT_FRIENDS: "Users are not friends",
    ErrorCode.USER_NOT_FOUND: "User not found",
}


class ServiceError(Exception):
    def __init__(self, code: ErrorCode, message: Optional[str] = None):
        self.code = code
        self.message = message or code.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.code.status_code

    def __repr__(self) -> str:
        return f"<ServiceError code={self.code.value} message={self.message!r}>"
