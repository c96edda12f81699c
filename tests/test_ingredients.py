"""Tests for the ingredient catalog."""
from __future__ import annotations

import pytest

from mealops.models import Role

EGG = {"name": "Egg", "kcalPer100g": 143, "proteinPer100g": 13, "carbsPer100g": 1.1, "fatPer100g": 9.5}


@pytest.fixture
async def admin(make_user):
    _, headers = await make_user("admin@example.com", role=Role.ADMIN)
    return headers


async def test_list_is_public_and_sorted(client, make_ingredient):
    await make_ingredient("Olive Oil", 884, fat=100)
    await make_ingredient("Chicken Breast", 165, 31, 0, 3.6)
    resp = await client.get("/api/v1/ingredients")
    assert resp.status_code == 200
    data = resp.json()
    assert [i["name"] for i in data] == ["Chicken Breast", "Olive Oil"]
    assert data[1]["kcalPer100g"] == 884
    assert data[1]["fatPer100g"] == 100


async def test_create_requires_login(client):
    resp = await client.post("/api/v1/ingredients", json=EGG)
    assert resp.status_code == 401


async def test_create_requires_admin(client, make_user):
    _, headers = await make_user()
    resp = await client.post("/api/v1/ingredients", headers=headers, json=EGG)
    assert resp.status_code == 403
    assert resp.json() == {"error": "forbidden", "message": "Admin role required"}


async def test_create_ingredient(client, admin):
    resp = await client.post("/api/v1/ingredients", headers=admin, json={**EGG, "name": "  Egg  "})
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Egg"
    assert data["carbsPer100g"] == 1.1
    assert data["id"]


async def test_duplicate_name_conflicts(client, admin):
    await client.post("/api/v1/ingredients", headers=admin, json=EGG)
    resp = await client.post("/api/v1/ingredients", headers=admin, json=EGG)
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"


@pytest.mark.parametrize("patch", [{"name": "   "}, {"kcalPer100g": -1}, {"fatPer100g": -0.5}])
async def test_create_rejects_bad_values(client, admin, patch):
    resp = await client.post("/api/v1/ingredients", headers=admin, json={**EGG, **patch})
    assert resp.status_code == 422


async def test_update_ingredient(client, admin, make_ingredient):
    egg = await make_ingredient("Egg", 143, 13, 1.1, 9.5)
    resp = await client.patch(f"/api/v1/ingredients/{egg}", headers=admin, json={"name": "Whole Egg", "fatPer100g": 10})
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Whole Egg"
    assert data["fatPer100g"] == 10
    assert data["kcalPer100g"] == 143


async def test_update_missing_is_404(client, admin):
    resp = await client.patch("/api/v1/ingredients/missing", headers=admin, json={"kcalPer100g": 1})
    assert resp.status_code == 404


async def test_update_to_taken_name_conflicts(client, admin, make_ingredient):
    await make_ingredient("Egg", 143)
    rice = await make_ingredient("Rice", 130)
    resp = await client.patch(f"/api/v1/ingredients/{rice}", headers=admin, json={"name": "Egg"})
    assert resp.status_code == 409


async def test_delete_unused_ingredient(client, admin, make_ingredient):
    egg = await make_ingredient("Egg", 143)
    resp = await client.delete(f"/api/v1/ingredients/{egg}", headers=admin)
    assert resp.status_code == 204

    resp = await client.delete(f"/api/v1/ingredients/{egg}", headers=admin)
    assert resp.status_code == 404


async def test_delete_referenced_ingredient_conflicts(client, admin, make_ingredient, make_recipe):
    egg = await make_ingredient("Egg", 143)
    await make_recipe(admin, egg)

    resp = await client.delete(f"/api/v1/ingredients/{egg}", headers=admin)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Ingredient is already used in recipes and cannot be deleted"

    resp = await client.get("/api/v1/ingredients")
    assert [i["name"] for i in resp.json()] == ["Egg"]


@pytest.mark.parametrize("patch", [{"kcalPer100g": None}, {"name": None}, {"fatPer100g": None, "carbsPer100g": 2}])
async def test_update_rejects_explicit_null(client, admin, make_ingredient, patch):
    egg = await make_ingredient("Egg", 143, 13, 1.1, 9.5)
    resp = await client.patch(f"/api/v1/ingredients/{egg}", headers=admin, json=patch)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"

    resp = await client.get("/api/v1/ingredients")
    assert resp.json()[0]["kcalPer100g"] == 143
    assert resp.json()[0]["carbsPer100g"] == 1.1
