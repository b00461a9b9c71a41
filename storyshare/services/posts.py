# storyshare/services/posts.py
# -----------------------------------------------------------------------------
# Посты: валидация содержимого, правило видимости, CRUD.
#
# Видимость:
#   • public       — видят все, включая анонима (viewer_id = None)
#   • friends_only — аноним не видит никогда; автор видит всегда;
#                    остальные — только если дружат с автором
#
# Ошибки валидации приходят с категориями (EMPTY_CONTENT / INVALID_FORMAT /
# FILE_TOO_LARGE); при создании/редактировании выбрасываем самую приоритетную:
# empty > format > size.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Union

from sqlalchemy.orm import Session

from storyshare.constants import (
    DEFAULT_VISIBILITY,
    MAX_IMAGE_SIZE,
    MAX_VIDEO_SIZE,
    SUPPORTED_IMAGE_FORMATS,
    SUPPORTED_VIDEO_FORMATS,
)
from storyshare.db import Storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.post import Post, Visibility
from storyshare.schemas.post import (
    ContentIssue,
    ImageContent,
    PostUpdate,
    TextContent,
    ValidationResult,
    VideoContent,
)
from storyshare.services.friends import are_friends
from storyshare.utils.clock import utcnow

log = logging.getLogger(__name__)

AnyContent = Union[TextContent, ImageContent, VideoContent]

# Порядок = приоритет при выборе ошибки
_ERROR_PRIORITY = (ErrorCode.EMPTY_CONTENT, ErrorCode.INVALID_FORMAT, ErrorCode.FILE_TOO_LARGE)

# label, форматы, подпись форматов, лимит, подпись лимита
_MEDIA_RULES = {
    "image": ("Image", SUPPORTED_IMAGE_FORMATS, "JPEG, PNG, GIF", MAX_IMAGE_SIZE, "10MB"),
    "video": ("Video", SUPPORTED_VIDEO_FORMATS, "MP4, WebM", MAX_VIDEO_SIZE, "100MB"),
}


def _validate_media(content: Union[ImageContent, VideoContent], errors: List[ContentIssue]) -> None:
    label, formats, formats_label, max_size, max_label = _MEDIA_RULES[content.type]

    # Нужен хотя бы один указатель на содержимое: URL или MIME загруженного файла
    if not content.media_url and not content.mime_type:
        errors.append(ContentIssue(code=ErrorCode.EMPTY_CONTENT, message=f"{label} content cannot be empty"))
        return

    if content.mime_type and content.mime_type not in formats:
        errors.append(ContentIssue(
            code=ErrorCode.INVALID_FORMAT,
            message=f"Unsupported {label.lower()} format. Supported formats: {formats_label}",
        ))

    if content.file_size is not None and content.file_size > max_size:
        errors.append(ContentIssue(
            code=ErrorCode.FILE_TOO_LARGE,
            message=f"{label} file exceeds maximum size of {max_label}",
        ))


def validate_content(content: Optional[AnyContent]) -> ValidationResult:
    """Ошибки копятся, а не обрываются на первой."""
    if content is None:
        return ValidationResult(
            valid=False,
            errors=[ContentIssue(code=ErrorCode.EMPTY_CONTENT, message="Content cannot be empty")],
        )

    errors: List[ContentIssue] = []
    if isinstance(content, TextContent):
        if not content.text or not content.text.strip():
            errors.append(ContentIssue(code=ErrorCode.EMPTY_CONTENT, message="Text content cannot be empty"))
    else:
        _validate_media(content, errors)

    return ValidationResult(valid=not errors, errors=errors)


def _raise_for_invalid(result: ValidationResult) -> None:
    if result.valid:
        return
    message = "; ".join(result.messages)
    for code in _ERROR_PRIORITY:
        if result.has(code):
            if code == ErrorCode.EMPTY_CONTENT:
                raise ServiceError(code)
            raise ServiceError(code, message)
    raise ServiceError(ErrorCode.EMPTY_CONTENT)


def _dump_content(content: AnyContent) -> dict:
    return content.model_dump(by_alias=True, exclude_none=True)


def _parse_visibility(value) -> Visibility:
    try:
        return Visibility(value)
    except ValueError:
        raise ServiceError(
            ErrorCode.VALIDATION_ERROR,
            f"Invalid visibility: {value}. Allowed: {', '.join(v.value for v in Visibility)}",
        ) from None


def can_view_post(db: Session, post: Post, viewer_id: Optional[str]) -> bool:
    if post.visibility == Visibility.public:
        return True
    if not viewer_id:
        return False
    if post.author_id == viewer_id:
        return True
    return are_friends(db, post.author_id, viewer_id)


def _get_owned_post(db: Session, post_id: str, user_id: Optional[str]) -> Post:
    """UNAUTHORIZED -> POST_NOT_FOUND -> ACCESS_DENIED, именно в таком порядке."""
    if not user_id:
        raise ServiceError(ErrorCode.UNAUTHORIZED)
    post = db.get(Post, post_id) if post_id else None
    if not post:
        raise ServiceError(ErrorCode.POST_NOT_FOUND)
    if post.author_id != user_id:
        raise ServiceError(ErrorCode.ACCESS_DENIED)
    return post


class PostService:
    def __init__(self, storage: Storage, clock: Callable = utcnow):
        self.storage = storage
        self.clock = clock

    validate_content = staticmethod(validate_content)

    def can_view_post(self, post: Post, viewer_id: Optional[str]) -> bool:
        with self.storage.session() as db:
            return can_view_post(db, post, viewer_id)

    def get_post(self, post_id: str, requester_id: Optional[str]) -> Optional[Post]:
        """
        None — поста нет; ACCESS_DENIED — пост есть, но смотреть нельзя.
        Это два разных исхода, не схлопываем их.
        """
        with self.storage.session() as db:
            post = db.get(Post, post_id) if post_id else None
            if not post:
                return None
            if not can_view_post(db, post, requester_id):
                raise ServiceError(ErrorCode.ACCESS_DENIED)
            return post

    def create_post(
        self,
        user_id: Optional[str],
        content: Optional[AnyContent],
        visibility: Optional[Visibility] = None,
    ) -> Post:
        if not user_id:
            raise ServiceError(ErrorCode.UNAUTHORIZED)

        _raise_for_invalid(validate_content(content))
        visibility = _parse_visibility(visibility) if visibility else DEFAULT_VISIBILITY

        now = self.clock()
        post = Post(
            author_id=user_id,
            content=_dump_content(content),
            visibility=visibility,
            created_at=now,
            updated_at=now,
            is_edited=False,
        )
        with self.storage.session() as db:
            db.add(post)
            db.flush()

        log.info("post created id=%s author=%s visibility=%s", post.id, user_id, post.visibility.value)
        return post

    def update_post(self, post_id: str, user_id: Optional[str], updates: PostUpdate) -> Post:
        with self.storage.session() as db:
            post = _get_owned_post(db, post_id, user_id)

            # Права проверены раньше валидации; всё проверяем до первой записи
            if updates.content is not None:
                _raise_for_invalid(validate_content(updates.content))
            visibility = _parse_visibility(updates.visibility) if updates.visibility is not None else None

            if updates.content is not None:
                post.content = _dump_content(updates.content)
            if visibility is not None:
                post.visibility = visibility

            # id / author_id / created_at не трогаем
            post.is_edited = True
            post.updated_at = max(self.clock(), post.updated_at)

        log.info("post updated id=%s", post.id)
        return post

    def delete_post(self, post_id: str, user_id: Optional[str]) -> None:
        with self.storage.session() as db:
            post = _get_owned_post(db, post_id, user_id)
            db.delete(post)

        log.info("post deleted id=%s author=%s", post_id, user_id)

    def get_posts_by_author(self, author_id: str, viewer_id: Optional[str]) -> List[Post]:
        """Посты автора, которые viewer может видеть, новые первыми."""
        with self.storage.session() as db:
            posts = (
                db.query(Post)
                .filter(Post.author_id == author_id)
                .order_by(Post.created_at.desc(), Post.id.desc())
                .all()
            )
            return [p for p in posts if can_view_post(db, p, viewer_id)]
