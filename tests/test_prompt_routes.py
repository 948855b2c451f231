from conftest import auth_headers, create_prompt


class TestCreatePrompt:
    def test_requires_auth(self, client):
        response = client.post("/api/prompts", json={"title": "Test", "prompt": "Hello"})
        assert response.status_code == 401

    def test_defaults_and_placeholders(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers, category=None, tags=[])
        assert prompt["category"] == "Uncategorized"
        assert prompt["placeholders"] == ["company", "quarter"]
        assert prompt["difficulty"] == "medium"
        assert prompt["rating"] == 0
        assert prompt["usageCount"] == 0
        assert prompt["tags"] == []

    def test_links_known_category(self, client):
        headers = auth_headers(client)
        category = client.post(
            "/api/categories", json={"name": "Analysis & Research"}, headers=headers
        ).json()["data"]
        prompt = create_prompt(client, headers)
        assert prompt["categoryId"] == category["id"]

    def test_title_required(self, client):
        headers = auth_headers(client)
        response = client.post("/api/prompts", json={"title": "  ", "prompt": "Hello"}, headers=headers)
        assert response.status_code == 400

    def test_difficulty_is_normalized(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers, difficulty="HARD")
        assert prompt["difficulty"] == "hard"

    def test_unknown_difficulty_rejected(self, client):
        headers = auth_headers(client)
        response = client.post(
            "/api/prompts", json={"title": "T", "prompt": "P", "difficulty": "extreme"}, headers=headers
        )
        assert response.status_code == 400


class TestRatingAggregation:
    def test_rating_follows_reviews(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers, title="Test")
        assert client.get(f"/api/prompts/{prompt['id']}").json()["data"]["rating"] == 0

        response = client.post(f"/api/prompts/{prompt['id']}/review", json={"rating": 4}, headers=headers)
        assert response.status_code == 201
        assert response.json()["prompt"]["rating"] == 4.0
        assert client.get(f"/api/prompts/{prompt['id']}").json()["data"]["rating"] == 4.0

        client.post(f"/api/prompts/{prompt['id']}/review", json={"rating": 2}, headers=headers)
        detail = client.get(f"/api/prompts/{prompt['id']}").json()["data"]
        assert detail["rating"] == 3.0
        assert detail["reviewCount"] == 2
        assert len(detail["reviews"]) == 2

    def test_rating_rounds_half_up(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers)
        for rating in (5, 4, 4, 4):
            client.post(f"/api/prompts/{prompt['id']}/reviews", json={"rating": rating}, headers=headers)
        # 17 / 4 = 4.25
        assert client.get(f"/api/prompts/{prompt['id']}").json()["data"]["rating"] == 4.3


class TestListPrompts:
    def test_filters(self, client):
        headers = auth_headers(client)
        first = create_prompt(client, headers, title="Market map", prompt="Study the market", tags=["market"])
        second = create_prompt(
            client, headers, title="Code review", prompt="Review this code", category="Technical & Development",
            tags=["code", "review"],
        )

        def titles(**params):
            response = client.get("/api/prompts", params=params)
            assert response.status_code == 200
            return [p["title"] for p in response.json()["data"]]

        assert titles() == ["Code review", "Market map"]
        assert titles(category="Technical & Development") == ["Code review"]
        assert titles(category="all") == ["Code review", "Market map"]
        assert titles(search="MARKET") == ["Market map"]
        assert titles(tags="market,nothing") == ["Market map"]
        assert titles(userId=first["userId"]) == ["Code review", "Market map"]
        assert titles(limit=1, offset=1) == ["Market map"]

        client.post(f"/api/prompts/{first['id']}/review", json={"rating": 5}, headers=headers)
        assert titles(minRating=4) == ["Market map"]
        assert titles(sort="rating")[0] == "Market map"

        client.post(f"/api/prompts/{second['id']}/use")
        assert titles(sort="usage")[0] == "Code review"

    def test_list_items_have_summary(self, client):
        headers = auth_headers(client)
        create_prompt(client, headers, prompt="Please analyze our project timeline")
        item = client.get("/api/prompts").json()["data"][0]
        assert item["summary"] == "Analyze project"

    def test_invalid_limit(self, client):
        assert client.get("/api/prompts", params={"limit": 0}).status_code == 400


class TestGetPrompt:
    def test_unknown_prompt(self, client):
        response = client.get("/api/prompts/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Prompt not found"}


class TestUpdatePrompt:
    def test_owner_can_update(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers)
        response = client.put(
            f"/api/prompts/{prompt['id']}",
            json={"title": "Renamed", "prompt": "Write about {topic}"},
            headers=headers,
        )
        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["title"] == "Renamed"
        assert updated["placeholders"] == ["topic"]

    def test_other_user_forbidden(self, client):
        owner = auth_headers(client)
        prompt = create_prompt(client, owner)
        other = auth_headers(client, email="bo@acme-corp.com", name="Bo")
        response = client.put(f"/api/prompts/{prompt['id']}", json={"title": "Mine now"}, headers=other)
        assert response.status_code == 403
        assert response.json() == {"error": "You can only edit your own prompts"}


class TestDeletePrompt:
    def test_delete_removes_prompt_and_threads(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers)
        client.post(f"/api/prompts/{prompt['id']}/review", json={"rating": 3}, headers=headers)
        client.post(f"/api/prompts/{prompt['id']}/comments", json={"content": "Nice"}, headers=headers)

        assert client.delete(f"/api/prompts/{prompt['id']}", headers=headers).status_code == 204
        assert client.get(f"/api/prompts/{prompt['id']}").status_code == 404
        assert client.get(f"/api/prompts/{prompt['id']}/comments").status_code == 404
        assert client.get("/api/prompts").json()["data"] == []

    def test_other_user_forbidden(self, client):
        prompt = create_prompt(client, auth_headers(client))
        other = auth_headers(client, email="bo@acme-corp.com", name="Bo")
        response = client.delete(f"/api/prompts/{prompt['id']}", headers=other)
        assert response.status_code == 403
        assert response.json() == {"error": "You can only delete your own prompts"}


class TestUsePrompt:
    def test_use_counts_without_auth(self, client):
        prompt = create_prompt(client, auth_headers(client))
        response = client.post(f"/api/prompts/{prompt['id']}/use")
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Usage tracked"
        assert body["data"]["usageCount"] == 1
        assert body["data"]["lastUsed"] is not None

        client.post(f"/api/prompts/{prompt['id']}/use")
        assert client.get(f"/api/prompts/{prompt['id']}").json()["data"]["usageCount"] == 2

    def test_use_unknown_prompt(self, client):
        assert client.post("/api/prompts/missing/use").status_code == 404


class TestRenderPrompt:
    def test_render_fills_values(self, client):
        prompt = create_prompt(client, auth_headers(client))
        response = client.post(f"/api/prompts/{prompt['id']}/render", json={"values": {"company": "Acme"}})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["text"] == "Analyze Acme results for {quarter}"
        assert data["missing"] == ["Quarter"]


class TestFavorites:
    def test_favorite_lifecycle(self, client):
        headers = auth_headers(client)
        prompt = create_prompt(client, headers)

        assert client.post(f"/api/prompts/{prompt['id']}/favorite", headers=headers).status_code == 201
        assert client.post(f"/api/prompts/{prompt['id']}/favorite", headers=headers).status_code == 201
        favorites = client.get("/api/auth/me/favorites", headers=headers).json()["data"]
        assert [f["id"] for f in favorites] == [prompt["id"]]

        assert client.delete(f"/api/prompts/{prompt['id']}/favorite", headers=headers).status_code == 204
        assert client.get("/api/auth/me/favorites", headers=headers).json()["data"] == []
        response = client.delete(f"/api/prompts/{prompt['id']}/favorite", headers=headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Favorite not found"}


class TestTagsAndSearch:
    def test_tag_counts(self, client):
        headers = auth_headers(client)
        create_prompt(client, headers, tags=["analysis", "finance"])
        create_prompt(client, headers, tags=["analysis"])
        tags = client.get("/api/tags").json()["data"]
        assert tags == [{"tag": "analysis", "count": 2}, {"tag": "finance", "count": 1}]

    def test_taxonomy(self, client):
        taxonomy = client.get("/api/tags/taxonomy").json()["data"]
        assert "one-off" in taxonomy["USAGE_PATTERN"]

    def test_search_orders_by_rating(self, client):
        headers = auth_headers(client)
        low = create_prompt(client, headers, title="Budget plan A", prompt="Plan the budget")
        high = create_prompt(client, headers, title="Budget plan B", prompt="Plan the budget again")
        client.post(f"/api/prompts/{low['id']}/review", json={"rating": 2}, headers=headers)
        client.post(f"/api/prompts/{high['id']}/review", json={"rating": 5}, headers=headers)
        results = client.get("/api/search", params={"q": "budget"}).json()["data"]
        assert [r["id"] for r in results] == [high["id"], low["id"]]


class TestPlaceholderAnalysis:
    def test_analyze(self, client):
        response = client.post("/api/placeholders/analyze", json={"text": "Analyze {company} for [quarter"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["placeholders"] == ["company"]
        assert data["mapping"] == {"Company": "company"}
        assert data["errors"] == ["Unmatched square brackets detected in prompt"]
        assert data["summary"] == "Analyze content"


class TestHealth:
    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["storage"] in ("sql", "json")
