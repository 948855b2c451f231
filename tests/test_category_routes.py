from fastapi.testclient import TestClient

from app.main import create_app
from app.services.category_services import DEFAULT_CATEGORIES
from conftest import auth_headers, create_prompt, make_settings


class TestCategoryCrud:
    def test_create_and_list_with_counts(self, client):
        headers = auth_headers(client)
        response = client.post(
            "/api/categories", json={"name": "Analysis & Research", "description": "Digging in"}, headers=headers
        )
        assert response.status_code == 201
        assert response.json()["data"]["promptCount"] == 0

        create_prompt(client, headers)
        categories = client.get("/api/categories").json()["data"]
        assert [(c["name"], c["promptCount"]) for c in categories] == [("Analysis & Research", 1)]

    def test_create_requires_auth(self, client):
        assert client.post("/api/categories", json={"name": "Anything"}).status_code == 401

    def test_duplicate_name(self, client):
        headers = auth_headers(client)
        client.post("/api/categories", json={"name": "Writing"}, headers=headers)
        response = client.post("/api/categories", json={"name": "Writing"}, headers=headers)
        assert response.status_code == 409
        assert response.json() == {"error": "Category already exists"}

    def test_rename_carries_prompts(self, client):
        headers = auth_headers(client)
        category = client.post("/api/categories", json={"name": "Analysis & Research"}, headers=headers).json()["data"]
        prompt = create_prompt(client, headers)

        response = client.put(f"/api/categories/{category['id']}", json={"name": "Research"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Research"
        assert response.json()["data"]["promptCount"] == 1

        moved = client.get(f"/api/prompts/{prompt['id']}").json()["data"]
        assert moved["category"] == "Research"
        assert moved["categoryId"] == category["id"]

    def test_rename_onto_existing_name(self, client):
        headers = auth_headers(client)
        first = client.post("/api/categories", json={"name": "One"}, headers=headers).json()["data"]
        client.post("/api/categories", json={"name": "Two"}, headers=headers)
        response = client.put(f"/api/categories/{first['id']}", json={"name": "Two"}, headers=headers)
        assert response.status_code == 409

    def test_delete_in_use_rejected(self, client):
        headers = auth_headers(client)
        category = client.post("/api/categories", json={"name": "Analysis & Research"}, headers=headers).json()["data"]
        create_prompt(client, headers)
        response = client.delete(f"/api/categories/{category['id']}", headers=headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Cannot delete category that contains prompts"}

    def test_delete_empty_category(self, client):
        headers = auth_headers(client)
        category = client.post("/api/categories", json={"name": "Spare"}, headers=headers).json()["data"]
        assert client.delete(f"/api/categories/{category['id']}", headers=headers).status_code == 204
        assert client.get("/api/categories").json()["data"] == []
        assert client.delete(f"/api/categories/{category['id']}", headers=headers).status_code == 404


class TestDefaultCategories:
    def test_seeded_on_startup(self, tmp_path):
        app = create_app(make_settings(tmp_path, "json", SEED_DEFAULT_CATEGORIES=True))
        with TestClient(app) as seeded:
            names = {c["name"] for c in seeded.get("/api/categories").json()["data"]}
        assert names == {name for name, _ in DEFAULT_CATEGORIES}

    def test_seed_skipped_when_categories_exist(self, tmp_path):
        settings = make_settings(tmp_path, "json", SEED_DEFAULT_CATEGORIES=True)
        with TestClient(create_app(settings)):
            pass
        with TestClient(create_app(settings)) as again:
            categories = again.get("/api/categories").json()["data"]
        assert len(categories) == len(DEFAULT_CATEGORIES)
