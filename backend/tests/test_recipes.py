from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.app import app
from backend.config import DEFAULT_APP_CONFIG
from backend.recipes.repository import (
    InMemoryRecipeRepository,
    get_recipe_repository,
    load_seed_recipes,
)

NEW_RECIPE = {
    "title": "Avocado Toast",
    "image": "https://images.example.com/recipe/avocado-toast.jpg",
    "ingredients": ["sourdough", "avocado", "lemon", "chili flakes"],
    "steps": ["Toast the bread", "Mash the avocado", "Season and spread"],
    "category": "Breakfast",
}


@pytest.fixture
def repo():
    return InMemoryRecipeRepository(load_seed_recipes(DEFAULT_APP_CONFIG.seed_path))


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_recipe_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(c):
    c.post("/auth/signin", json={"username": "user", "password": "user123"})


# ── Seed data ────────────────────────────────────────────────────────────


def test_seed_recipes_load(repo):
    recipes = repo.list_all()
    assert len(recipes) == 12
    pancakes = repo.get("r001")
    assert pancakes.title == "Classic Pancakes"
    assert "baking powder" in pancakes.ingredients
    assert pancakes.description == "Fluffy weekend pancakes"
    assert repo.get("r002").description == ""


# ── Listing ──────────────────────────────────────────────────────────────


def test_all_recipes_newest_first(client):
    resp = client.get("/recipe/all")
    assert resp.status_code == 200
    ids = [r["id"] for r in resp.json()["results"]]
    assert ids[0] == "r012"
    assert ids[-1] == "r001"


def test_category_filter(client):
    resp = client.get("/recipe/category", params={"category": "Dessert"})
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert {r["id"] for r in results} == {"r007", "r011"}
    assert all(r["category"] == "Dessert" for r in results)


@pytest.mark.parametrize("params", [{}, {"category": "All"}])
def test_category_all_returns_everything(client, params):
    resp = client.get("/recipe/category", params=params)
    assert len(resp.json()["results"]) == 12


def test_category_unknown_returns_empty(client):
    resp = client.get("/recipe/category", params={"category": "Brunch"})
    assert resp.status_code == 200
    assert resp.json()["results"] == []


def test_featured_recipes(client, repo):
    resp = client.get("/recipe/featured")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    expected = {rid for rid in DEFAULT_APP_CONFIG.featured_recipe_ids if repo.get(rid)}
    assert {r["id"] for r in body["results"]} == expected


# ── Single recipe ────────────────────────────────────────────────────────


def test_get_recipe(client):
    resp = client.get("/recipe/r003")
    assert resp.status_code == 200
    assert resp.json()["results"]["title"] == "Tomato Basil Pasta"


def test_get_recipe_not_found(client):
    resp = client.get("/recipe/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "status_code": 404, "message": "Recipe not found"}


# ── Create ───────────────────────────────────────────────────────────────


def test_add_recipe_requires_login():
    c = TestClient(app)
    assert c.post("/recipe/add", json=NEW_RECIPE).status_code == 401


def test_add_recipe(client, repo):
    _login(client)
    resp = client.post("/recipe/add", json=NEW_RECIPE)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Recipe created"
    created = body["recipe"]
    assert created["difficulty"] == "Easy"
    assert repo.get(created["id"]).title == "Avocado Toast"
    # Newest first
    assert client.get("/recipe/all").json()["results"][0]["id"] == created["id"]


def test_add_recipe_rejects_bad_category(client):
    _login(client)
    resp = client.post("/recipe/add", json={**NEW_RECIPE, "category": "Brunch"})
    assert resp.status_code == 422


def test_add_recipe_rejects_empty_ingredients(client):
    _login(client)
    resp = client.post("/recipe/add", json={**NEW_RECIPE, "ingredients": []})
    assert resp.status_code == 422


def test_added_recipe_is_searchable(client, repo):
    _login(client)
    client.post("/recipe/add", json=NEW_RECIPE)
    matches = repo.find_by_ingredient_substring(["avocado"])
    assert [r.title for r in matches] == ["Avocado Toast"]


# ── Edit ─────────────────────────────────────────────────────────────────


def test_edit_recipe_partial_update(client):
    _login(client)
    resp = client.put("/recipe/r002", json={"title": "Cheesy Omelette", "description": "", "steps": []})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Recipe updated successfully"
    recipe = body["recipe"]
    assert recipe["title"] == "Cheesy Omelette"
    assert recipe["ingredients"] == ["egg", "milk", "cheddar cheese", "butter"]
    assert len(recipe["steps"]) == 3
    assert recipe["updated_at"] > recipe["created_at"]


def test_edit_recipe_not_found(client):
    _login(client)
    resp = client.put("/recipe/missing", json={"title": "x"})
    assert resp.status_code == 404


def test_edit_recipe_requires_login():
    c = TestClient(app)
    assert c.put("/recipe/r001", json={"title": "x"}).status_code == 401
