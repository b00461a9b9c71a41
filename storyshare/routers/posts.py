# storyshare/routers/posts.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from storyshare.db import Storage, get_storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.user import User
from storyshare.schemas.post import PostCreate, PostOut, PostUpdate
from storyshare.services.posts import PostService
from storyshare.utils.auth_dep import get_current_user, get_optional_user

router = APIRouter(tags=["Посты"])


@router.post("/posts", response_model=PostOut, response_model_exclude_none=True, status_code=201)
def create_post(
    payload: PostCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Видимость по умолчанию — friends_only."""
    return PostService(storage).create_post(current_user.id, payload.content, payload.visibility)


@router.get("/posts/{post_id}", response_model=PostOut, response_model_exclude_none=True)
def get_post(
    post_id: str,
    storage: Storage = Depends(get_storage),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Работает и для анонима. 404 — поста нет, 403 — пост есть, но он только для друзей.
    """
    post = PostService(storage).get_post(post_id, current_user.id if current_user else None)
    if not post:
        raise ServiceError(ErrorCode.POST_NOT_FOUND)
    return post


@router.put("/posts/{post_id}", response_model=PostOut, response_model_exclude_none=True)
def update_post(
    post_id: str,
    payload: PostUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    return PostService(storage).update_post(post_id, current_user.id, payload)


@router.delete("/posts/{post_id}", status_code=204)
def delete_post(
    post_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    PostService(storage).delete_post(post_id, current_user.id)
    return Response(status_code=204)


@router.get("/users/{user_id}/posts", response_model=List[PostOut], response_model_exclude_none=True)
def get_user_posts(
    user_id: str,
    storage: Storage = Depends(get_storage),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Посты пользователя, видимые текущему зрителю (новые первыми)."""
    return PostService(storage).get_posts_by_author(user_id, current_user.id if current_user else None)
