"""
Общие фикстуры: свежее хранилище на каждый тест, управляемые часы,
сервисы поверх хранилища и TestClient вокруг приложения с тем же хранилищем.
"""

import os

# PBKDF2 на 100k итераций делает тесты медленными; формат хеша от этого не меняется
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storyshare.db import Storage  # noqa: E402
from storyshare.main import create_app  # noqa: E402
from storyshare.services.auth import AuthService  # noqa: E402
from storyshare.services.feed import FeedService  # noqa: E402
from storyshare.services.friends import FriendService  # noqa: E402
from storyshare.services.media import MediaService  # noqa: E402
from storyshare.services.posts import PostService  # noqa: E402

T0 = datetime(2026, 1, 1, 10, 0, 0)


class FakeClock:
    """Часы, которые двигаются только руками."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def storage():
    s = Storage()
    yield s
    s.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth(storage, clock):
    return AuthService(storage, clock=clock)


@pytest.fixture
def friends(storage, clock):
    return FriendService(storage, clock=clock)


@pytest.fixture
def posts(storage, clock):
    return PostService(storage, clock=clock)


@pytest.fixture
def feed(storage):
    return FeedService(storage)


@pytest.fixture
def media(storage, clock):
    return MediaService(storage, clock=clock)


@pytest.fixture
def make_user(auth):
    """make_user("alice") -> User с email alice@example.com и паролем pw-alice."""
    def _make(name: str):
        return auth.register(f"{name}@example.com", name, f"pw-{name}")
    return _make


@pytest.fixture
def befriend(friends):
    def _befriend(a, b):
        request = friends.send_friend_request(a.id, b.id)
        friends.accept_friend_request(request.id, b.id)
    return _befriend


@pytest.fixture
def client(storage):
    with TestClient(create_app(storage)) as c:
        yield c


@pytest.fixture
def login_as(client):
    """Регистрирует пользователя через API и возвращает (user_json, headers)."""
    def _login(name: str):
        r = client.post(
            "/api/auth/register",
            json={"email": f"{name}@example.com", "username": name, "password": f"pw-{name}"},
        )
        assert r.status_code == 201, r.text
        user = r.json()
        r = client.post("/api/auth/login", json={"email": f"{name}@example.com", "password": f"pw-{name}"})
        assert r.status_code == 200, r.text
        return user, {"Authorization": f"Bearer {r.json()['token']}"}
    return _login
