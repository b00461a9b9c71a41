# storyshare/schemas/feed.py
from typing import List

from storyshare.schemas.common import CamelModel
from storyshare.schemas.post import PostOut


class FeedOut(CamelModel):
    posts: List[PostOut]
    has_more: bool
    total: int
