from conftest import auth_headers, create_prompt


class TestOverview:
    def test_empty_library(self, client):
        data = client.get("/api/stats").json()["data"]
        assert data["totals"] == {"prompts": 0, "categories": 0, "users": 0, "reviews": 0, "usage": 0}
        assert data["averages"]["rating"] == 0

    def test_totals_and_rankings(self, client):
        headers = auth_headers(client)
        rated = create_prompt(client, headers, title="Rated")
        create_prompt(client, headers, title="Plain", category="Writing")
        client.post(f"/api/prompts/{rated['id']}/review", json={"rating": 5}, headers=headers)
        client.post(f"/api/prompts/{rated['id']}/use")

        data = client.get("/api/stats").json()["data"]
        assert data["totals"]["prompts"] == 2
        assert data["totals"]["users"] == 1
        assert data["totals"]["reviews"] == 1
        assert data["totals"]["usage"] == 1
        assert data["averages"]["rating"] == 5.0
        assert [p["title"] for p in data["topRatedPrompts"]] == ["Rated"]
        assert [p["title"] for p in data["recentPrompts"]] == ["Plain", "Rated"]
        assert {c["name"] for c in data["topCategories"]} == {"Analysis & Research", "Writing"}


class TestActivity:
    def test_breakdown_counts_logged_actions(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers)
        client.get(f"/api/prompts/{prompt['id']}")

        data = client.get("/api/stats/activity", params={"timeframe": "7d"}).json()["data"]
        assert data["timeframe"] == "7d"
        assert data["breakdown"]["user_signup"] == 1
        assert data["breakdown"]["prompt_created"] == 1
        assert data["breakdown"]["prompt_viewed"] == 1
        assert data["total"] == 3

    def test_unknown_timeframe(self, client):
        assert client.get("/api/stats/activity", params={"timeframe": "1y"}).status_code == 400


class TestUserStats:
    def test_requires_auth(self, client):
        assert client.get("/api/stats/user").status_code == 401

    def test_own_numbers(self, client):
        headers = auth_headers(client)
        other = auth_headers(client, email="bo@acme-corp.com", name="Bo")
        mine = create_prompt(client, headers, title="Mine")
        create_prompt(client, other, title="Theirs")
        client.post(f"/api/prompts/{mine['id']}/review", json={"rating": 4}, headers=other)
        client.post(f"/api/prompts/{mine['id']}/use")

        data = client.get("/api/stats/user", headers=headers).json()["data"]
        assert data["prompts"]["total"] == 1
        assert data["prompts"]["totalUsage"] == 1
        assert data["prompts"]["totalReviews"] == 1
        assert data["reviews"]["total"] == 0
        actions = [activity["action"] for activity in data["recentActivity"]]
        assert actions == ["prompt_created", "user_signup"]
