# storyshare/models/friend_request.py

import enum
import uuid

from sqlalchemy import Column, String, ForeignKey, DateTime, Enum, Index

from storyshare.db import Base


class FriendRequestStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class FriendRequest(Base):
    """
    Заявка в друзья. pending переходит ровно один раз в accepted или declined.
    Записи не удаляются (история), но поиск дублей смотрит только на pending.
    """
    __tablename__ = "friend_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    from_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    to_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        Enum(FriendRequestStatus, name="friend_request_status"),
        nullable=False,
        default=FriendRequestStatus.pending,
    )
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_friend_requests_pair_status", "from_user_id", "to_user_id", "status"),
        Index("ix_friend_requests_to_status", "to_user_id", "status"),
    )

    def __repr__(self):
        return f"<FriendRequest(id={self.id}, from={self.from_user_id}, to={self.to_user_id}, status={self.status})>"
