# storyshare/models/friend.py
from sqlalchemy import Column, String, ForeignKey, DateTime, Index

from storyshare.db import Base


class Friendship(Base):
    """
    Направленное ребро дружбы: user_id считает friend_id другом.
    Рёбра всегда создаются и удаляются парой (A→B и B→A) в одной транзакции,
    поэтому чтение дружбы симметрично.
    """
    __tablename__ = "friendships"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    friend_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_friendships_user_id", "user_id"),
    )

    def __repr__(self):
        return f"<Friendship(user_id={self.user_id}, friend_id={self.friend_id})>"
