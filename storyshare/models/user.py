# storyshare/models/user.py

import uuid

from sqlalchemy import Column, String, DateTime
from storyshare.db import Base


class User(Base):
    """
    Зарегистрированный пользователь. После регистрации не меняется.
    email хранится уже нормализованным (trim + lower), username — как ввели,
    а username_key (lower) держит уникальность без учёта регистра.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, nullable=False)
    username_key = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, username={self.username})>"
