# storyshare/main.py
# Главная точка входа FastAPI для StoryShare.
#  • create_app(storage) — собирает приложение вокруг ОДНОГО хранилища (в тестах — своего)
#  • обработчики ошибок: ServiceError -> {error, message} со статусом из ErrorCode,
#    ошибки валидации запроса -> 400 VALIDATION_ERROR, всё прочее -> 500 INTERNAL_ERROR

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from storyshare.db import Storage  # noqa: E402
from storyshare.errors import ErrorCode, ServiceError  # noqa: E402
from storyshare.routers.auth import router as auth_router  # noqa: E402
from storyshare.routers.feed import router as feed_router  # noqa: E402
from storyshare.routers.friends import router as friends_router  # noqa: E402
from storyshare.routers.media import router as media_router  # noqa: E402
from storyshare.routers.posts import router as posts_router  # noqa: E402
from storyshare.utils.clock import iso_utc, utcnow  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [o.strip() for o in raw.split(",") if o.strip()]


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    app = FastAPI(
        title="StoryShare Backend",
        description="Backend для StoryShare: регистрация, посты с видимостью, друзья и лента.",
    )
    app.state.storage = storage or Storage(os.getenv("DATABASE_URL", "sqlite://"))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Ошибки ---
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code.value, "message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": ErrorCode.VALIDATION_ERROR.value,
                "message": "Invalid request",
                "details": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()],
            },
        )

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        log.exception("unexpected error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
        )

    # --- Подключение роутеров ---
    app.include_router(auth_router,    prefix="/api/auth",    tags=["Авторизация"])
    app.include_router(posts_router,   prefix="/api")
    app.include_router(friends_router, prefix="/api/friends")
    app.include_router(feed_router,    prefix="/api/feed")
    app.include_router(media_router,   prefix="/api/media")

    @app.get("/api/health")
    def health():
        """Простой healthcheck."""
        return {"status": "ok", "timestamp": iso_utc(utcnow()), "service": "storyshare"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storyshare.main:app", host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")), reload=False)
