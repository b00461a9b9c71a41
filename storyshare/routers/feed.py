# storyshare/routers/feed.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from storyshare.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from storyshare.db import Storage, get_storage
from storyshare.models.user import User
from storyshare.schemas.feed import FeedOut
from storyshare.schemas.post import PostOut
from storyshare.services.feed import FeedService
from storyshare.utils.auth_dep import get_optional_user

router = APIRouter(tags=["Лента"])


@router.get("", response_model=FeedOut, response_model_exclude_none=True)
def get_feed(
    storage: Storage = Depends(get_storage),
    current_user: Optional[User] = Depends(get_optional_user),
    # пагинация
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=0, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
):
    """
    Лента по правилам видимости:
      - аноним видит только public
      - вошедший — public от всех, friends_only от себя и друзей
    Новые первыми; total — число всех видимых постов без учёта пагинации.
    """
    result = FeedService(storage).get_feed(current_user.id if current_user else None, limit, offset)
    return FeedOut(
        posts=[PostOut.model_validate(p) for p in result.posts],
        has_more=result.has_more,
        total=result.total,
    )
