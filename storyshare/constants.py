# storyshare/constants.py
# Константы домена: форматы медиа, лимиты, сессии, пагинация.

from datetime import timedelta

from storyshare.models.post import Visibility

SUPPORTED_IMAGE_FORMATS = ("image/jpeg", "image/png", "image/gif")
SUPPORTED_VIDEO_FORMATS = ("video/mp4", "video/webm")
SUPPORTED_MIME_TYPES = SUPPORTED_IMAGE_FORMATS + SUPPORTED_VIDEO_FORMATS

# Лимиты размера (байты, включительно)
MAX_IMAGE_SIZE = 10 * 1024 * 1024   # 10MB
MAX_VIDEO_SIZE = 100 * 1024 * 1024  # 100MB

SESSION_DURATION = timedelta(hours=24)

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

DEFAULT_VISIBILITY = Visibility.friends_only
