# storyshare/schemas/media.py
from storyshare.schemas.common import CamelModel, UtcDatetime


class MediaOut(CamelModel):
    id: str
    url: str
    mime_type: str
    size: int
    created_at: UtcDatetime
