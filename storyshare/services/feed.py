# storyshare/services/feed.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from storyshare.db import Storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.post import Post
from storyshare.services.posts import can_view_post


@dataclass
class FeedResult:
    posts: List[Post] = field(default_factory=list)
    has_more: bool = False
    total: int = 0


class FeedService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def get_feed(self, viewer_id: Optional[str], limit: int, offset: int = 0) -> FeedResult:
        """
        Лента для viewer_id (None — аноним):
          1) берём все посты и оставляем те, что проходят can_view_post
          2) сортируем по created_at по убыванию; при равенстве — по id (по убыванию),
             чтобы порядок был детерминированным
          3) total считаем ДО пагинации, затем режем [offset, offset + limit)
        limit = 0 даёт пустую страницу, но честные total и has_more.
        """
        if limit < 0 or offset < 0:
            raise ServiceError(ErrorCode.VALIDATION_ERROR, "limit and offset must be non-negative")

        with self.storage.session() as db:
            posts = db.query(Post).all()
            visible = [p for p in posts if can_view_post(db, p, viewer_id)]

        visible.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        total = len(visible)
        page = visible[offset:offset + limit]

        return FeedResult(posts=page, has_more=offset + len(page) < total, total=total)
