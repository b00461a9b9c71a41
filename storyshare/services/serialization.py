# storyshare/services/serialization.py
"""
JSON-сериализация постов в проводной формат:
  {id, authorId, content, visibility, createdAt, updatedAt, isEdited}
Даты — ISO-8601 UTC с суффиксом Z, content — размеченное объединение как есть
(отсутствующие необязательные поля не пишем).
"""

from __future__ import annotations

import json
from typing import Iterable, List, Union

from pydantic import TypeAdapter, ValidationError

from storyshare.models.post import Post
from storyshare.schemas.post import PostOut

_posts_adapter = TypeAdapter(List[PostOut])


def _to_out(post: Union[Post, PostOut]) -> PostOut:
    return post if isinstance(post, PostOut) else PostOut.model_validate(post)


def serialize_post(post: Union[Post, PostOut]) -> str:
    return _to_out(post).model_dump_json(by_alias=True, exclude_none=True)


def deserialize_post(data: str) -> PostOut:
    """Битый JSON / пропущенные поля -> pydantic.ValidationError."""
    return PostOut.model_validate_json(data)


def serialize_posts(posts: Iterable[Union[Post, PostOut]]) -> str:
    return _posts_adapter.dump_json([_to_out(p) for p in posts], by_alias=True, exclude_none=True).decode("utf-8")


def deserialize_posts(data: str) -> List[PostOut]:
    items = json.loads(data)
    if not isinstance(items, list):
        raise ValueError("Invalid posts: expected an array")

    result = []
    for index, item in enumerate(items):
        try:
            result.append(PostOut.model_validate(item))
        except ValidationError as e:
            raise ValueError(f"Invalid post at index {index}: {e}") from e
    return result
