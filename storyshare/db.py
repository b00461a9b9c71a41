# storyshare/db.py
# Хранилище сущностей: SQLAlchemy поверх in-memory SQLite, Base и явные импорты моделей.
# Один экземпляр Storage = одна независимая база (в проде — ровно один на процесс,
# в тестах — по одному на тест).

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _engine_options(url: str) -> dict:
    """Опции движка: check_same_thread и StaticPool понимает только SQLite."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    options = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # in-memory база живёт ровно в одном соединении
        options["poolclass"] = StaticPool
    return options


class Storage:
    """
    Авторитетное хранилище всех сущностей и их индексов.
    Никакой бизнес-логики: только движок, сессии и очистка.

    Все изменения идут через session(): один re-entrant lock на экземпляр,
    commit при успехе и rollback при исключении. Поэтому парные записи
    (две стороны дружбы, статус заявки + связи) видны другим только целиком.
    """

    def __init__(self, url: str = "sqlite://"):
        self.engine = create_engine(url, **_engine_options(url))
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,  # объекты остаются читаемыми после закрытия сессии
            bind=self.engine,
        )
        self._lock = threading.RLock()
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self._lock:
            db = self.SessionLocal()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    def clear(self) -> None:
        """Сбросить все таблицы разом (для изоляции тестов)."""
        with self._lock:
            with self.engine.begin() as conn:
                for table in reversed(Base.metadata.sorted_tables):
                    conn.execute(table.delete())

    def dispose(self) -> None:
        self.engine.dispose()


def get_storage(request: Request) -> Storage:
    """FastAPI-зависимость: хранилище, созданное в create_app()."""
    return request.app.state.storage


from storyshare.models import (  # noqa: E402
    user,
    session,
    post,
    friend,
    friend_request,
    media,
)
