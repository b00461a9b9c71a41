# storyshare/routers/friends.py
from fastapi import APIRouter, Depends, Response

from storyshare.db import Storage, get_storage
from storyshare.models.user import User
from storyshare.schemas.friend import FriendRequestCreate, FriendRequestOut, FriendRequestsOut, FriendsOut
from storyshare.services.friends import FriendService
from storyshare.utils.auth_dep import get_current_user

router = APIRouter(tags=["Друзья"])


# =========================
# ЗАЯВКИ
# =========================

@router.post("/request", response_model=FriendRequestOut, status_code=201)
def send_request(
    payload: FriendRequestCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return FriendService(storage).send_friend_request(current_user.id, payload.target_user_id)


@router.get("/requests", response_model=FriendRequestsOut)
def list_incoming_requests(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Входящие заявки в ожидании ответа."""
    return {"requests": FriendService(storage).get_pending_requests(current_user.id)}


@router.post("/accept/{request_id}", response_model=dict)
def accept_request(
    request_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    FriendService(storage).accept_friend_request(request_id, current_user.id)
    return {"message": "Friend request accepted"}


@router.post("/decline/{request_id}", response_model=dict)
def decline_request(
    request_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    FriendService(storage).decline_friend_request(request_id, current_user.id)
    return {"message": "Friend request declined"}


# =========================
# ДРУЗЬЯ
# =========================

@router.get("", response_model=FriendsOut)
def get_friends(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return {"friends": FriendService(storage).get_friends(current_user.id)}


@router.delete("/{friend_id}", status_code=204)
def remove_friend(
    friend_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Удалить может любая из сторон; рёбра уходят в обе стороны."""
    FriendService(storage).remove_friend(current_user.id, friend_id)
    return Response(status_code=204)
