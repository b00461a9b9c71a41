# storyshare/services/friends.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from storyshare.db import Storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.friend import Friendship
from storyshare.models.friend_request import FriendRequest, FriendRequestStatus
from storyshare.models.user import User
from storyshare.utils.clock import utcnow

log = logging.getLogger(__name__)


def are_friends(db: Session, user_id: Optional[str], other_id: Optional[str]) -> bool:
    """Прямой поиск ребра user_id -> other_id по первичному ключу."""
    if not user_id or not other_id:
        return False
    return db.get(Friendship, (user_id, other_id)) is not None


def friend_ids(db: Session, user_id: str) -> List[str]:
    rows = (
        db.query(Friendship.friend_id)
        .filter(Friendship.user_id == user_id)
        .order_by(Friendship.created_at.asc())
        .all()
    )
    return [r[0] for r in rows]


def _pending_request(db: Session, from_user_id: str, to_user_id: str) -> Optional[FriendRequest]:
    return (
        db.query(FriendRequest)
        .filter(
            FriendRequest.from_user_id == from_user_id,
            FriendRequest.to_user_id == to_user_id,
            FriendRequest.status == FriendRequestStatus.pending,
        )
        .first()
    )


class FriendService:
    """
    Машина состояний заявки: pending -> accepted | declined (оба терминальные).
    Дружба — пара направленных рёбер, создаётся и удаляется только целиком.
    """

    def __init__(self, storage: Storage, clock: Callable = utcnow):
        self.storage = storage
        self.clock = clock

    def send_friend_request(self, from_user_id: str, to_user_id: str) -> FriendRequest:
        if from_user_id == to_user_id:
            raise ServiceError(ErrorCode.SELF_FRIEND_REQUEST)

        with self.storage.session() as db:
            if not db.get(User, from_user_id) or not db.get(User, to_user_id):
                raise ServiceError(ErrorCode.USER_NOT_FOUND)

            if are_friends(db, from_user_id, to_user_id):
                raise ServiceError(ErrorCode.DUPLICATE_REQUEST)

            # Дубль ищем в обе стороны, хотя хранение направленное
            if _pending_request(db, from_user_id, to_user_id) or _pending_request(db, to_user_id, from_user_id):
                raise ServiceError(ErrorCode.DUPLICATE_REQUEST)

            request = FriendRequest(
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                status=FriendRequestStatus.pending,
                created_at=self.clock(),
            )
            db.add(request)
            db.flush()

        log.info("friend request sent id=%s from=%s to=%s", request.id, from_user_id, to_user_id)
        return request

    def _get_actionable(self, db: Session, request_id: str, acting_user_id: str) -> FriendRequest:
        """
        Общие проверки accept/decline:
          - нет заявки -> REQUEST_NOT_FOUND
          - действует не получатель -> FORBIDDEN
          - заявка уже не pending -> REQUEST_NOT_FOUND (отдельной ошибки "уже обработана" нет)
        """
        request = db.get(FriendRequest, request_id) if request_id else None
        if not request:
            raise ServiceError(ErrorCode.REQUEST_NOT_FOUND)
        if request.to_user_id != acting_user_id:
            raise ServiceError(ErrorCode.FORBIDDEN, "Only the recipient can respond to a friend request")
        if request.status != FriendRequestStatus.pending:
            raise ServiceError(ErrorCode.REQUEST_NOT_FOUND)
        return request

    def accept_friend_request(self, request_id: str, acting_user_id: str) -> FriendRequest:
        with self.storage.session() as db:
            request = self._get_actionable(db, request_id, acting_user_id)
            request.status = FriendRequestStatus.accepted

            # Оба ребра с одной меткой времени, в одной транзакции
            now = self.clock()
            db.add(Friendship(user_id=request.from_user_id, friend_id=request.to_user_id, created_at=now))
            db.add(Friendship(user_id=request.to_user_id, friend_id=request.from_user_id, created_at=now))

        log.info("friendship created %s <-> %s", request.from_user_id, request.to_user_id)
        return request

    def decline_friend_request(self, request_id: str, acting_user_id: str) -> FriendRequest:
        with self.storage.session() as db:
            request = self._get_actionable(db, request_id, acting_user_id)
            request.status = FriendRequestStatus.declined

        log.info("friend request declined id=%s", request.id)
        return request

    def remove_friend(self, user_id: str, friend_id: str) -> None:
        with self.storage.session() as db:
            link = db.get(Friendship, (user_id, friend_id)) if user_id and friend_id else None
            if not link:
                raise ServiceError(ErrorCode.NOT_FRIENDS)

            db.delete(link)
            reverse = db.get(Friendship, (friend_id, user_id))
            if reverse:
                db.delete(reverse)

        log.info("friendship removed %s <-> %s", user_id, friend_id)

    def get_friends(self, user_id: str) -> List[User]:
        with self.storage.session() as db:
            ids = friend_ids(db, user_id)
            if not ids:
                return []
            profiles_map = {u.id: u for u in db.query(User).filter(User.id.in_(ids)).all()}
            # Не нашли профиль — просто пропускаем (инварианты не должны такого допускать)
            return [profiles_map[i] for i in ids if i in profiles_map]

    def are_friends(self, user_id: str, other_id: str) -> bool:
        with self.storage.session() as db:
            return are_friends(db, user_id, other_id)

    def get_pending_requests(self, user_id: str) -> List[FriendRequest]:
        """Входящие заявки в ожидании, старые первыми."""
        with self.storage.session() as db:
            return (
                db.query(FriendRequest)
                .filter(
                    FriendRequest.to_user_id == user_id,
                    FriendRequest.status == FriendRequestStatus.pending,
                )
                .order_by(FriendRequest.created_at.asc())
                .all()
            )
