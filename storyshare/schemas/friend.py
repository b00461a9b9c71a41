# storyshare/schemas/friend.py
from typing import List

from storyshare.models.friend_request import FriendRequestStatus
from storyshare.schemas.common import CamelModel, UtcDatetime
from storyshare.schemas.user import UserOut


class FriendRequestCreate(CamelModel):
    """Тело POST /friends/request: {"targetUserId": "..."}"""
    target_user_id: str


class FriendRequestOut(CamelModel):
    id: str
    from_user_id: str
    to_user_id: str
    status: FriendRequestStatus
    created_at: UtcDatetime


class FriendsOut(CamelModel):
    friends: List[UserOut]


class FriendRequestsOut(CamelModel):
    requests: List[FriendRequestOut]
