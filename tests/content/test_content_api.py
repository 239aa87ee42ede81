"""Articles, benefits timeline and meditation endpoints."""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from snapout.content.catalog import ARTICLES, BENEFITS

SLUG = "dopamine-reset-the-science"


class TestArticles:
    async def test_list_is_public(self, client: AsyncClient):
        response = await client.get("/api/v1/content/articles")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == len(ARTICLES)
        assert data["completed_count"] == 0
        assert all(a["completed"] is False for a in data["articles"])

    async def test_filter_by_category(self, client: AsyncClient):
        response = await client.get("/api/v1/content/articles", params={"category": "science"})
        articles = response.json()["articles"]
        assert articles
        assert {a["category"] for a in articles} == {"science"}
        assert articles[0]["category_name"] == "Science & Research"

    async def test_unknown_category(self, client: AsyncClient):
        response = await client.get("/api/v1/content/articles", params={"category": "gossip"})
        assert response.status_code == 400

    async def test_article_detail(self, client: AsyncClient):
        response = await client.get(f"/api/v1/content/articles/{SLUG}")
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Dopamine Reset: The Science"
        assert data["read_minutes"] == 7
        assert len(data["sections"]) == 3

    async def test_missing_article(self, client: AsyncClient):
        response = await client.get("/api/v1/content/articles/no-such-article")
        assert response.status_code == 404


class TestCompletion:
    async def test_complete_is_idempotent(self, authed_client: AsyncClient):
        first = await authed_client.post(f"/api/v1/content/articles/{SLUG}/complete")
        second = await authed_client.post(f"/api/v1/content/articles/{SLUG}/complete")
        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["completed"] is True

        listing = (await authed_client.get("/api/v1/content/articles")).json()
        assert listing["completed_count"] == 1
        completed = [a["slug"] for a in listing["articles"] if a["completed"]]
        assert completed == [SLUG]

        detail = (await authed_client.get(f"/api/v1/content/articles/{SLUG}")).json()
        assert detail["completed"] is True

    async def test_complete_unknown_article(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/content/articles/no-such-article/complete")
        assert response.status_code == 404

    async def test_complete_requires_auth(self, client: AsyncClient):
        response = await client.post(f"/api/v1/content/articles/{SLUG}/complete")
        assert response.status_code in (401, 403)


class TestBenefits:
    async def test_anonymous_visitor_sees_all_locked(self, client: AsyncClient):
        data = (await client.get("/api/v1/content/benefits")).json()
        assert data["current_streak_days"] == 0
        assert len(data["benefits"]) == len(BENEFITS)
        assert not any(b["unlocked"] for b in data["benefits"])

    async def test_unlocked_by_streak(self, authed_client: AsyncClient):
        start = datetime.now(timezone.utc) - timedelta(days=15)
        await authed_client.put("/api/v1/streak/start-date", json={"start_date": start.isoformat()})

        data = (await authed_client.get("/api/v1/content/benefits")).json()
        assert data["current_streak_days"] == 15
        unlocked = [b["day"] for b in data["benefits"] if b["unlocked"]]
        assert unlocked == [1, 7, 14]


class TestMeditations:
    async def test_list(self, client: AsyncClient):
        data = (await client.get("/api/v1/content/meditations")).json()
        by_slug = {m["slug"]: m for m in data["meditations"]}
        assert set(by_slug) == {"relaxation", "focus", "anxiety-relief", "urge"}
        assert by_slug["focus"]["pattern"]["name"] == "4-7-8 Breathing"
        assert by_slug["relaxation"]["pattern"]["cycle_seconds"] == 12

    async def test_phase(self, client: AsyncClient):
        response = await client.get("/api/v1/content/meditations/relaxation/phase", params={"elapsed": 17})
        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "hold"
        assert data["remaining_seconds"] == 3
        assert data["completed_cycles"] == 1

    async def test_phase_unknown_meditation(self, client: AsyncClient):
        response = await client.get("/api/v1/content/meditations/yoga/phase", params={"elapsed": 1})
        assert response.status_code == 404

    async def test_phase_negative_elapsed_invalid(self, client: AsyncClient):
        response = await client.get("/api/v1/content/meditations/focus/phase", params={"elapsed": -1})
        assert response.status_code == 422
