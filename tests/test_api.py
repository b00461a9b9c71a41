"""
HTTP-уровень: коды статусов, формат ошибок {error, message}, camelCase в JSON.
"""

import pytest

from storyshare.constants import MAX_IMAGE_SIZE


def _error(r):
    return r.json()["error"]


class TestHealth:

    def test_health(self, client):
        r = client.get("/api/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")


class TestAuthApi:

    def test_register_login_me_logout(self, client, login_as):
        user, headers = login_as("alice")
        assert set(user) == {"id", "email", "username", "createdAt"}

        r = client.get("/api/auth/me", headers=headers)
        assert r.status_code == 200
        assert r.json()["id"] == user["id"]

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        r = client.get("/api/auth/me", headers=headers)
        assert r.status_code == 401
        assert _error(r) == "UNAUTHORIZED"

        r = client.post("/api/auth/logout", headers=headers)
        assert r.status_code == 401
        assert _error(r) == "INVALID_SESSION"

    def test_login_response_shape(self, client, login_as):
        login_as("alice")
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "pw-alice"})
        body = r.json()
        assert len(body["token"]) == 64
        assert body["expiresAt"].endswith("Z")

    def test_duplicate_email(self, client, login_as):
        login_as("alice")
        r = client.post(
            "/api/auth/register",
            json={"email": "ALICE@example.com", "username": "other", "password": "x"},
        )
        assert r.status_code == 409
        assert r.json() == {"error": "DUPLICATE_EMAIL", "message": "Email already registered"}

    def test_bad_credentials(self, client, login_as):
        login_as("alice")
        r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})
        assert r.status_code == 401
        assert _error(r) == "INVALID_CREDENTIALS"

    def test_empty_fields(self, client):
        r = client.post("/api/auth/register", json={"email": "", "username": "a", "password": "b"})
        assert r.status_code == 400
        assert _error(r) == "VALIDATION_ERROR"

    def test_malformed_body(self, client):
        r = client.post("/api/auth/register", json={"email": "a@example.com"})
        assert r.status_code == 400
        assert _error(r) == "VALIDATION_ERROR"
        assert r.json()["details"]

    def test_logout_without_token(self, client):
        r = client.post("/api/auth/logout")
        assert r.status_code == 401
        assert _error(r) == "UNAUTHORIZED"


class TestPostsApi:

    def test_create_requires_login(self, client):
        r = client.post("/api/posts", json={"content": {"type": "text", "text": "hi"}})
        assert r.status_code == 401

    def test_create_and_read(self, client, login_as):
        user, headers = login_as("alice")
        r = client.post("/api/posts", json={"content": {"type": "text", "text": "hi"}}, headers=headers)
        assert r.status_code == 201
        post = r.json()
        assert post["authorId"] == user["id"]
        assert post["visibility"] == "friends_only"
        assert post["isEdited"] is False
        assert post["createdAt"].endswith("Z")

        assert client.get(f"/api/posts/{post['id']}", headers=headers).status_code == 200
        # Аноним и посторонний — 403, а не 404
        r = client.get(f"/api/posts/{post['id']}")
        assert r.status_code == 403
        assert _error(r) == "ACCESS_DENIED"

    def test_missing_post(self, client):
        r = client.get("/api/posts/nope")
        assert r.status_code == 404
        assert _error(r) == "POST_NOT_FOUND"

    @pytest.mark.parametrize("content,status,code", [
        ({"type": "text", "text": "  "}, 400, "EMPTY_CONTENT"),
        ({"type": "image", "mimeType": "image/bmp"}, 400, "INVALID_FORMAT"),
        ({"type": "video", "mimeType": "video/mp4", "fileSize": 100 * 1024 * 1024 + 1}, 413, "FILE_TOO_LARGE"),
    ])
    def test_invalid_content(self, client, login_as, content, status, code):
        _, headers = login_as("alice")
        r = client.post("/api/posts", json={"content": content}, headers=headers)
        assert r.status_code == status
        assert _error(r) == code

    def test_missing_content(self, client, login_as):
        _, headers = login_as("alice")
        r = client.post("/api/posts", json={"visibility": "public"}, headers=headers)
        assert r.status_code == 400
        assert _error(r) == "EMPTY_CONTENT"

    def test_update_and_delete(self, client, login_as):
        _, alice = login_as("alice")
        _, bob = login_as("bob")
        post = client.post(
            "/api/posts", json={"content": {"type": "text", "text": "v1"}, "visibility": "public"}, headers=alice
        ).json()

        r = client.put(f"/api/posts/{post['id']}", json={"content": {"type": "text", "text": "v2"}}, headers=bob)
        assert r.status_code == 403

        r = client.put(f"/api/posts/{post['id']}", json={"content": {"type": "text", "text": "v2"}}, headers=alice)
        assert r.status_code == 200
        assert r.json()["isEdited"] is True
        assert r.json()["content"] == {"type": "text", "text": "v2"}
        assert r.json()["visibility"] == "public"

        assert client.delete(f"/api/posts/{post['id']}", headers=bob).status_code == 403
        assert client.delete(f"/api/posts/{post['id']}", headers=alice).status_code == 204
        assert client.get(f"/api/posts/{post['id']}").status_code == 404

    def test_user_posts(self, client, login_as):
        user, headers = login_as("alice")
        client.post("/api/posts", json={"content": {"type": "text", "text": "a"}, "visibility": "public"}, headers=headers)
        client.post("/api/posts", json={"content": {"type": "text", "text": "b"}}, headers=headers)
        assert len(client.get(f"/api/users/{user['id']}/posts").json()) == 1
        assert len(client.get(f"/api/users/{user['id']}/posts", headers=headers).json()) == 2


class TestFriendsAndFeedApi:

    def test_friendship_flow_unlocks_feed(self, client, login_as):
        alice, alice_h = login_as("alice")
        bob, bob_h = login_as("bob")
        client.post("/api/posts", json={"content": {"type": "text", "text": "for friends"}}, headers=alice_h)

        assert client.get("/api/feed", headers=bob_h).json()["total"] == 0

        r = client.post("/api/friends/request", json={"targetUserId": alice["id"]}, headers=bob_h)
        assert r.status_code == 201
        request_id = r.json()["id"]
        assert r.json()["status"] == "pending"

        r = client.post("/api/friends/request", json={"targetUserId": bob["id"]}, headers=alice_h)
        assert r.status_code == 409
        assert _error(r) == "DUPLICATE_REQUEST"

        incoming = client.get("/api/friends/requests", headers=alice_h).json()["requests"]
        assert [req["id"] for req in incoming] == [request_id]

        r = client.post(f"/api/friends/accept/{request_id}", headers=bob_h)
        assert r.status_code == 403
        assert _error(r) == "FORBIDDEN"
        assert client.post(f"/api/friends/accept/{request_id}", headers=alice_h).status_code == 200

        friends = client.get("/api/friends", headers=bob_h).json()["friends"]
        assert [f["username"] for f in friends] == ["alice"]

        feed = client.get("/api/feed", headers=bob_h).json()
        assert feed["total"] == 1
        assert feed["hasMore"] is False
        assert feed["posts"][0]["content"]["text"] == "for friends"

        assert client.delete(f"/api/friends/{alice['id']}", headers=bob_h).status_code == 204
        assert client.get("/api/feed", headers=bob_h).json()["total"] == 0
        r = client.delete(f"/api/friends/{alice['id']}", headers=bob_h)
        assert r.status_code == 400
        assert _error(r) == "NOT_FRIENDS"

    def test_self_request(self, client, login_as):
        me, headers = login_as("alice")
        r = client.post("/api/friends/request", json={"targetUserId": me["id"]}, headers=headers)
        assert r.status_code == 400
        assert _error(r) == "SELF_FRIEND_REQUEST"

    def test_decline(self, client, login_as):
        alice, alice_h = login_as("alice")
        _, bob_h = login_as("bob")
        request_id = client.post("/api/friends/request", json={"targetUserId": alice["id"]}, headers=bob_h).json()["id"]
        assert client.post(f"/api/friends/decline/{request_id}", headers=alice_h).status_code == 200
        r = client.post(f"/api/friends/accept/{request_id}", headers=alice_h)
        assert r.status_code == 404
        assert _error(r) == "REQUEST_NOT_FOUND"

    def test_anonymous_feed_paging(self, client, login_as):
        _, headers = login_as("alice")
        for i in range(3):
            client.post(
                "/api/posts", json={"content": {"type": "text", "text": str(i)}, "visibility": "public"}, headers=headers
            )
        r = client.get("/api/feed", params={"limit": 2})
        body = r.json()
        assert r.status_code == 200
        assert len(body["posts"]) == 2
        assert body["total"] == 3
        assert body["hasMore"] is True

    @pytest.mark.parametrize("params", [{"limit": -1}, {"offset": -1}, {"limit": 101}])
    def test_bad_paging(self, client, params):
        r = client.get("/api/feed", params=params)
        assert r.status_code == 400
        assert _error(r) == "VALIDATION_ERROR"


class TestMediaApi:

    def test_upload_and_fetch(self, client, login_as):
        _, headers = login_as("alice")
        payload = b"\x89PNGdata"
        r = client.post("/api/media", files={"file": ("a.png", payload, "image/png")}, headers=headers)
        assert r.status_code == 201
        body = r.json()
        assert body["mimeType"] == "image/png"
        assert body["size"] == len(payload) == 8
        assert body["url"] == f"/api/media/{body['id']}"

        r = client.get(body["url"])
        assert r.status_code == 200
        assert r.content == payload
        assert r.headers["content-type"].startswith("image/png")

    def test_upload_requires_login(self, client):
        r = client.post("/api/media", files={"file": ("a.png", b"x", "image/png")})
        assert r.status_code == 401

    def test_unsupported_type(self, client, login_as):
        _, headers = login_as("alice")
        r = client.post("/api/media", files={"file": ("a.bmp", b"BM", "image/bmp")}, headers=headers)
        assert r.status_code == 400
        assert _error(r) == "INVALID_FORMAT"

    def test_oversized_unsupported_type_is_format_error(self, client, login_as):
        _, headers = login_as("alice")
        payload = b"\0" * (MAX_IMAGE_SIZE + 10)
        r = client.post("/api/media", files={"file": ("big.bmp", payload, "image/bmp")}, headers=headers)
        assert r.status_code == 400
        assert _error(r) == "INVALID_FORMAT"
        assert r.json()["message"].startswith("Unsupported MIME type: image/bmp")

    def test_oversized_image(self, client, login_as):
        _, headers = login_as("alice")
        payload = b"\0" * (MAX_IMAGE_SIZE + 1)
        r = client.post("/api/media", files={"file": ("big.png", payload, "image/png")}, headers=headers)
        assert r.status_code == 413
        assert _error(r) == "FILE_TOO_LARGE"

    def test_empty_file(self, client, login_as):
        _, headers = login_as("alice")
        r = client.post("/api/media", files={"file": ("a.gif", b"", "image/gif")}, headers=headers)
        assert r.status_code == 400
        assert _error(r) == "EMPTY_CONTENT"

    def test_missing_media(self, client):
        r = client.get("/api/media/nope")
        assert r.status_code == 404
        assert _error(r) == "NOT_FOUND"
