# storyshare/routers/media.py
# Эндпоинты медиа:
#  • POST /api/media        — загрузка картинки/видео (multipart, нужен вход)
#  • GET  /api/media/{id}   — отдать байты с сохранённым Content-Type
# Сначала MIME-тип (400), потом размер. Файл читается кусками;
# превышение лимита для типа -> 413 сразу, не дочитывая.

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from fastapi.responses import JSONResponse

from storyshare.constants import MAX_IMAGE_SIZE, MAX_VIDEO_SIZE
from storyshare.db import Storage, get_storage
from storyshare.errors import ErrorCode, ServiceError
from storyshare.models.user import User
from storyshare.schemas.media import MediaOut
from storyshare.services.media import MediaService, ensure_supported_mime_type, is_video_mime_type
from storyshare.utils.auth_dep import get_current_user

router = APIRouter(tags=["Медиа"])

CHUNK_SIZE = 1024 * 1024  # 1MB


def _limit_for(ctype: str) -> int:
    return MAX_VIDEO_SIZE if is_video_mime_type(ctype) else MAX_IMAGE_SIZE


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes:
    """Читает UploadFile целиком, контролируя общий размер, и закрывает файл."""
    buf = bytearray()
    try:
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            buf.extend(chunk)
            if len(buf) > max_bytes:
                raise ServiceError(
                    ErrorCode.FILE_TOO_LARGE,
                    f"File exceeds maximum size of {max_bytes // (1024 * 1024)}MB",
                )
    finally:
        await file.close()
    return bytes(buf)


@router.post("", response_model=MediaOut, status_code=201)
async def upload_media(
    request: Request,
    file: UploadFile = File(...),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    ctype = (file.content_type or "").lower()
    # Тип проверяем до чтения: неподдерживаемый файл -> 400, а не 413 по чужому лимиту
    ensure_supported_mime_type(ctype)
    data = await _read_limited(file, _limit_for(ctype))

    service = MediaService(storage)
    media_id = service.upload_media(data, ctype)
    entry = service.get_media_entry(media_id)

    return MediaOut(
        id=entry.id,
        url=str(request.url_for("get_media", media_id=entry.id).path),
        mime_type=entry.mime_type,
        size=entry.size,
        created_at=entry.created_at,
    )


@router.get("/{media_id}", name="get_media")
def get_media(media_id: str, storage: Storage = Depends(get_storage)):
    entry = MediaService(storage).get_media_entry(media_id)
    if not entry:
        return JSONResponse(status_code=404, content={"error": "NOT_FOUND", "message": "Media not found"})
    return Response(content=entry.data, media_type=entry.mime_type)
