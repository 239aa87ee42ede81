"""Community posts, comments, likes and moderation."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from httpx import AsyncClient


async def _post(client: AsyncClient, headers: dict, title: str = "Day one", content: str = "Starting today") -> dict:
    response = await client.post(
        "/api/v1/community/posts",
        json={"title": title, "content": content},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestPosts:
    async def test_create_snapshots_streak(self, client: AsyncClient, make_user):
        alice = await make_user("Alice")
        start = datetime.now(timezone.utc) - timedelta(days=21)
        await client.put(
            "/api/v1/streak/start-date", json={"start_date": start.isoformat()}, headers=alice["headers"]
        )

        post = await _post(client, alice["headers"])
        assert post["author_name"] == "Alice"
        assert post["author_id"] == alice["user_id"]
        assert post["streak"] == 21
        assert post["likes"] == 0
        assert post["comment_count"] == 0

    async def test_blank_title_rejected(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.post(
            "/api/v1/community/posts", json={"title": "   ", "content": "x"}, headers=alice["headers"]
        )
        assert response.status_code == 400

    async def test_get_missing_post(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.get("/api/v1/community/posts/9999", headers=alice["headers"])
        assert response.status_code == 404

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/v1/community/posts")
        assert response.status_code in (401, 403)


class TestFilters:
    async def test_latest_most_liked_most_commented(self, client: AsyncClient, make_user):
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        first = await _post(client, alice["headers"], title="first")
        second = await _post(client, alice["headers"], title="second")
        third = await _post(client, alice["headers"], title="third")

        await client.post(f"/api/v1/community/posts/{first['id']}/like", headers=bob["headers"])
        await client.post(f"/api/v1/community/posts/{first['id']}/like", headers=alice["headers"])
        await client.post(f"/api/v1/community/posts/{second['id']}/like", headers=bob["headers"])
        for _ in range(2):
            await client.post(
                f"/api/v1/community/posts/{third['id']}/comments", json={"content": "nice"}, headers=bob["headers"]
            )

        async def titles(filter_: str) -> list[str]:
            response = await client.get(
                "/api/v1/community/posts", params={"filter": filter_}, headers=bob["headers"]
            )
            assert response.status_code == 200
            return [p["title"] for p in response.json()["posts"]]

        assert await titles("latest") == ["third", "second", "first"]
        assert await titles("most_liked") == ["first", "second", "third"]
        assert (await titles("most_commented"))[0] == "third"
        assert await titles("featured") == []

    async def test_limit(self, client: AsyncClient, make_user):
        alice = await make_user()
        for i in range(3):
            await _post(client, alice["headers"], title=f"post {i}")
        response = await client.get(
            "/api/v1/community/posts", params={"limit": 2}, headers=alice["headers"]
        )
        data = response.json()
        assert len(data["posts"]) == 2
        assert data["limit"] == 2

    async def test_unknown_filter(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.get(
            "/api/v1/community/posts", params={"filter": "trending"}, headers=alice["headers"]
        )
        assert response.status_code == 422


class TestComments:
    async def test_comment_increments_counter(self, client: AsyncClient, make_user):
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        post = await _post(client, alice["headers"])

        response = await client.post(
            f"/api/v1/community/posts/{post['id']}/comments",
            json={"content": "Proud of you"},
            headers=bob["headers"],
        )
        assert response.status_code == 201
        assert response.json()["author_name"] == "Bob"

        detail = (await client.get(f"/api/v1/community/posts/{post['id']}", headers=alice["headers"])).json()
        assert detail["comment_count"] == 1
        assert [c["content"] for c in detail["comments"]] == ["Proud of you"]

    async def test_comment_on_missing_post(self, client: AsyncClient, make_user):
        bob = await make_user()
        response = await client.post(
            "/api/v1/community/posts/9999/comments", json={"content": "hello"}, headers=bob["headers"]
        )
        assert response.status_code == 404


class TestLikes:
    async def test_toggle_like(self, client: AsyncClient, make_user):
        alice = await make_user()
        bob = await make_user()
        post = await _post(client, alice["headers"])
        url = f"/api/v1/community/posts/{post['id']}/like"

        liked = (await client.post(url, headers=bob["headers"])).json()
        assert liked == {"post_id": post["id"], "liked": True, "likes": 1}

        status = (await client.get(f"/api/v1/community/posts/{post['id']}/likes", headers=bob["headers"])).json()
        assert status["liked"] is True
        assert status["likes"] == 1

        unliked = (await client.post(url, headers=bob["headers"])).json()
        assert unliked["liked"] is False
        assert unliked["likes"] == 0

    async def test_like_mirrored_to_redis(self, client: AsyncClient, make_user, monkeypatch):
        redis = AsyncMock()
        monkeypatch.setattr("snapout.community.router.get_redis_optional", lambda: redis)
        alice = await make_user()
        post = await _post(client, alice["headers"])

        await client.post(f"/api/v1/community/posts/{post['id']}/like", headers=alice["headers"])
        redis.hset.assert_awaited_once_with("community:likes", str(post["id"]), 1)

    async def test_redis_failure_does_not_break_like(self, client: AsyncClient, make_user, monkeypatch):
        redis = AsyncMock()
        redis.hset.side_effect = ConnectionError("redis down")
        redis.hget.side_effect = ConnectionError("redis down")
        monkeypatch.setattr("snapout.community.router.get_redis_optional", lambda: redis)
        alice = await make_user()
        post = await _post(client, alice["headers"])

        response = await client.post(f"/api/v1/community/posts/{post['id']}/like", headers=alice["headers"])
        assert response.status_code == 200
        status = (await client.get(f"/api/v1/community/posts/{post['id']}/likes", headers=alice["headers"])).json()
        assert status["likes"] == 1


class TestDelete:
    async def test_only_author_can_delete(self, client: AsyncClient, make_user):
        alice = await make_user()
        bob = await make_user()
        post = await _post(client, alice["headers"])

        response = await client.delete(f"/api/v1/community/posts/{post['id']}", headers=bob["headers"])
        assert response.status_code == 403

        response = await client.delete(f"/api/v1/community/posts/{post['id']}", headers=alice["headers"])
        assert response.status_code == 204

        response = await client.get(f"/api/v1/community/posts/{post['id']}", headers=alice["headers"])
        assert response.status_code == 404

    async def test_delete_missing(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.delete("/api/v1/community/posts/9999", headers=alice["headers"])
        assert response.status_code == 404

    async def test_delete_drops_mirrored_like_count(self, client: AsyncClient, make_user, monkeypatch):
        redis = AsyncMock()
        monkeypatch.setattr("snapout.community.router.get_redis_optional", lambda: redis)
        alice = await make_user()
        post = await _post(client, alice["headers"])
        await client.post(f"/api/v1/community/posts/{post['id']}/like", headers=alice["headers"])

        response = await client.delete(f"/api/v1/community/posts/{post['id']}", headers=alice["headers"])
        assert response.status_code == 204
        redis.hdel.assert_awaited_once_with("community:likes", str(post["id"]))


class TestModeration:
    async def test_block_hides_posts(self, client: AsyncClient, make_user):
        alice = await make_user("Alice")
        bob = await make_user("Bob")
        await _post(client, alice["headers"], title="from alice")
        await _post(client, bob["headers"], title="from bob")

        response = await client.post(
            f"/api/v1/community/users/{alice['user_id']}/block", headers=bob["headers"]
        )
        assert response.status_code == 200
        # Blocking twice is harmless
        await client.post(f"/api/v1/community/users/{alice['user_id']}/block", headers=bob["headers"])

        feed = (await client.get("/api/v1/community/posts", headers=bob["headers"])).json()
        assert [p["title"] for p in feed["posts"]] == ["from bob"]

        alice_feed = (await client.get("/api/v1/community/posts", headers=alice["headers"])).json()
        assert len(alice_feed["posts"]) == 2

    async def test_cannot_block_self(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.post(
            f"/api/v1/community/users/{alice['user_id']}/block", headers=alice["headers"]
        )
        assert response.status_code == 400

    async def test_block_unknown_user(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.post("/api/v1/community/users/9999/block", headers=alice["headers"])
        assert response.status_code == 404

    async def test_report_user(self, client: AsyncClient, make_user):
        alice = await make_user()
        bob = await make_user()
        response = await client.post(
            f"/api/v1/community/users/{alice['user_id']}/report",
            json={"reason": "spam"},
            headers=bob["headers"],
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    async def test_cannot_report_self(self, client: AsyncClient, make_user):
        alice = await make_user()
        response = await client.post(
            f"/api/v1/community/users/{alice['user_id']}/report", json={}, headers=alice["headers"]
        )
        assert response.status_code == 400
