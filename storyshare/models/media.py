# storyshare/models/media.py

import uuid

from sqlalchemy import Column, String, Integer, DateTime, LargeBinary
from storyshare.db import Base


class MediaEntry(Base):
    """
    Загруженный бинарный файл (картинка/видео), не привязанный к посту.
    Байты хранятся как неизменяемое значение: копия на записи, bytes на чтении.
    """
    __tablename__ = "media"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    data = Column(LargeBinary, nullable=False)
    mime_type = Column(String(64), nullable=False)
    size = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<MediaEntry(id={self.id}, mime_type={self.mime_type}, size={self.size})>"
