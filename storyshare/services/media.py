# storyshare/services/media.py
# -----------------------------------------------------------------------------
# Хранилище загруженных файлов: непрозрачный blob по id.
# Поддерживаем только image/jpeg, image/png, image/gif, video/mp4, video/webm.
# Байты копируются при записи (bytes(...)), поэтому последующие изменения
# исходного bytearray не задевают сохранённое значение.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Callable, Optional

from storyshare.constants import SUPPORTED_IMAGE_FORMATS, SUPPORTED_MIME_TYPES, SUPPORTED_VIDEO_FORMATS
from storyshare.db import Storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.media import MediaEntry
from storyshare.utils.clock import utcnow

log = logging.getLogger(__name__)


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in SUPPORTED_MIME_TYPES


def is_image_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in SUPPORTED_IMAGE_FORMATS


def is_video_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in SUPPORTED_VIDEO_FORMATS


def ensure_supported_mime_type(mime_type: Optional[str]) -> None:
    if not is_supported_mime_type(mime_type):
        raise ServiceError(
            ErrorCode.INVALID_FORMAT,
            f"Unsupported MIME type: {mime_type}. Supported types: {', '.join(SUPPORTED_MIME_TYPES)}",
        )


class MediaService:
    def __init__(self, storage: Storage, clock: Callable = utcnow):
        self.storage = storage
        self.clock = clock

    def upload_media(self, data: bytes, mime_type: str) -> str:
        ensure_supported_mime_type(mime_type)
        if not data:
            raise ServiceError(ErrorCode.EMPTY_CONTENT, "Media data cannot be empty")

        payload = bytes(data)
        entry = MediaEntry(data=payload, mime_type=mime_type, size=len(payload), created_at=self.clock())
        with self.storage.session() as db:
            db.add(entry)
            db.flush()

        log.info("media uploaded id=%s mime=%s size=%s", entry.id, mime_type, entry.size)
        return entry.id

    def get_media_entry(self, media_id: str) -> Optional[MediaEntry]:
        with self.storage.session() as db:
            return db.get(MediaEntry, media_id) if media_id else None

    def get_media(self, media_id: str) -> Optional[bytes]:
        entry = self.get_media_entry(media_id)
        return bytes(entry.data) if entry else None

    def delete_media(self, media_id: str) -> bool:
        with self.storage.session() as db:
            entry = db.get(MediaEntry, media_id) if media_id else None
            if not entry:
                return False
            db.delete(entry)
            return True

    def media_exists(self, media_id: str) -> bool:
        return self.get_media_entry(media_id) is not None

    def get_media_count(self) -> int:
        with self.storage.session() as db:
            return db.query(MediaEntry).count()
