# storyshare/models/session.py

import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from storyshare.db import Base


class UserSession(Base):
    """
    Сессия входа. У одного пользователя может быть сколько угодно параллельных сессий.
    Истёкшие сессии не вычищаются фоном: удаляются в момент первого чтения.
    """
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<UserSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
