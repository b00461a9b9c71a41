# storyshare/models/post.py
# -----------------------------------------------------------------------------
# МОДЕЛЬ: Post (SQLAlchemy)
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Column, String, DateTime, Boolean, Enum, ForeignKey, JSON, Index

from storyshare.db import Base


class Visibility(str, enum.Enum):
    public = "public"
    friends_only = "friends_only"


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Содержимое — tagged union в JSON: {"type": "text"|"image"|"video", ...}
    content = Column(JSON, nullable=False)

    visibility = Column(
        Enum(Visibility, name="post_visibility"),
        nullable=False,
        default=Visibility.friends_only,
        comment="Кто видит пост: public|friends_only",
    )

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    is_edited = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_posts_author_id", "author_id"),
        Index("ix_posts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Post id={self.id} author={self.author_id} visibility={self.visibility} edited={self.is_edited}>"
