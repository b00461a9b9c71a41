# storyshare/schemas/post.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: Post
# -----------------------------------------------------------------------------
# Содержимое поста — размеченное объединение по полю "type":
#   text  -> TextContent{text}
#   image -> ImageContent{mediaUrl?, mimeType?, fileSize?}
#   video -> VideoContent{mediaUrl?, mimeType?, fileSize?}
# Правила непустоты/форматов/размеров проверяет PostService.validate_content,
# а не схемы: так ошибки приходят с нашими кодами, а не как 422.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from storyshare.errors import ErrorCode
from storyshare.models.post import Visibility
from storyshare.schemas.common import CamelModel, UtcDatetime


class TextContent(CamelModel):
    type: Literal["text"] = "text"
    text: Optional[str] = None


class ImageContent(CamelModel):
    type: Literal["image"] = "image"
    media_url: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class VideoContent(CamelModel):
    type: Literal["video"] = "video"
    media_url: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


PostContent = Annotated[
    Union[TextContent, ImageContent, VideoContent],
    Field(discriminator="type"),
]


class PostCreate(CamelModel):
    content: Optional[PostContent] = None
    visibility: Optional[Visibility] = None


class PostUpdate(CamelModel):
    """Незаданные поля берутся из текущего поста."""
    content: Optional[PostContent] = None
    visibility: Optional[Visibility] = None


class PostOut(CamelModel):
    id: str
    author_id: str
    content: PostContent
    visibility: Visibility
    created_at: UtcDatetime
    updated_at: UtcDatetime
    is_edited: bool


class ContentIssue(BaseModel):
    code: ErrorCode
    message: str


class ValidationResult(BaseModel):
    valid: bool
    errors: List[ContentIssue] = []

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def has(self, code: ErrorCode) -> bool:
        return any(e.code == code for e in self.errors)
