"""Tests for recipe creation, listing and detail."""
from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from mealops.models import Role


@pytest.fixture
async def cook(make_user):
    _, headers = await make_user()
    return headers


async def test_create_recipe_computes_nutrition(client, cook, make_ingredient):
    chicken = await make_ingredient("Chicken Breast", 165, 31, 0, 3.6)
    rice = await make_ingredient("Rice (white, cooked)", 130, 2.7, 28, 0.3)
    resp = await client.post("/api/v1/recipes", headers=cook, json={
        "name": "Chicken & Rice",
        "servings": 4,
        "notes": "  Meal prep  ",
        "items": [
            {"ingredientId": chicken, "quantityG": 200},
            {"ingredientId": rice, "quantityG": 100},
        ],
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    recipe = data["recipe"]
    assert recipe["name"] == "Chicken & Rice"
    assert recipe["notes"] == "Meal prep"
    assert [i["ingredientName"] for i in recipe["items"]] == ["Chicken Breast", "Rice (white, cooked)"]
    assert [i["quantityG"] for i in recipe["items"]] == [200, 100]

    # 330 + 130 kcal, 62 + 2.7 protein, 0 + 28 carbs, 7.2 + 0.3 fat
    assert data["nutrition"]["total"] == {"kcal": 460.0, "protein": 64.7, "carbs": 28.0, "fat": 7.5}
    assert data["nutrition"]["perServing"] == {"kcal": 115.0, "protein": 16.2, "carbs": 7.0, "fat": 1.9}


async def test_two_servings_of_200g(client, cook, make_ingredient):
    chicken = await make_ingredient("Chicken Breast", 165)
    resp = await client.post("/api/v1/recipes", headers=cook, json={
        "name": "Plain Chicken",
        "servings": 2,
        "items": [{"ingredientId": chicken, "quantityG": 200}],
    })
    nutrition = resp.json()["nutrition"]
    assert nutrition["total"]["kcal"] == 330.0
    assert nutrition["perServing"]["kcal"] == 165.0


async def test_unknown_ingredient_rejected(client, cook, make_ingredient):
    chicken = await make_ingredient("Chicken Breast", 165)
    resp = await client.post("/api/v1/recipes", headers=cook, json={
        "name": "Mystery",
        "servings": 1,
        "items": [
            {"ingredientId": chicken, "quantityG": 100},
            {"ingredientId": "nope", "quantityG": 100},
        ],
    })
    assert resp.status_code == 400
    assert resp.json() == {"error": "unknown_ingredient", "message": "Unknown ingredientId: nope"}

    resp = await client.get("/api/v1/recipes", headers=cook)
    assert resp.json() == []


@pytest.mark.parametrize("body", [
    {"name": "", "servings": 1, "items": [{"ingredientId": "x", "quantityG": 1}]},
    {"name": "Zero", "servings": 0, "items": [{"ingredientId": "x", "quantityG": 1}]},
    {"name": "Empty", "servings": 1, "items": []},
    {"name": "Negative", "servings": 1, "items": [{"ingredientId": "x", "quantityG": -5}]},
])
async def test_invalid_body_is_validation_error(client, cook, body):
    resp = await client.post("/api/v1/recipes", headers=cook, json=body)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


async def test_requires_auth(client):
    resp = await client.get("/api/v1/recipes")
    assert resp.status_code == 401


async def test_list_newest_first_with_nutrition(client, cook, make_ingredient, make_recipe):
    egg = await make_ingredient("Egg", 143, 13, 1.1, 9.5)
    await make_recipe(cook, egg, name="First", quantity_g=100, servings=1)
    await make_recipe(cook, egg, name="Second", quantity_g=50, servings=1)

    resp = await client.get("/api/v1/recipes", headers=cook)
    assert resp.status_code == 200
    data = resp.json()
    assert [r["name"] for r in data] == ["Second", "First"]
    assert data[0]["nutrition"]["total"]["kcal"] == 71.5
    assert data[1]["nutrition"]["total"]["kcal"] == 143.0
    assert "items" not in data[0]


async def test_list_only_own_recipes(client, cook, make_user, make_ingredient, make_recipe):
    egg = await make_ingredient("Egg", 143)
    await make_recipe(cook, egg, name="Mine")
    _, other = await make_user("other@example.com")
    await make_recipe(other, egg, name="Theirs")

    resp = await client.get("/api/v1/recipes", headers=cook)
    assert [r["name"] for r in resp.json()] == ["Mine"]


async def test_get_recipe_detail(client, cook, make_ingredient, make_recipe):
    egg = await make_ingredient("Egg", 143, 13, 1.1, 9.5)
    recipe_id = await make_recipe(cook, egg, name="Boiled Eggs", quantity_g=120, servings=2)

    resp = await client.get(f"/api/v1/recipes/{recipe_id}", headers=cook)
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == recipe_id
    assert data["items"][0]["ingredientId"] == egg
    assert data["items"][0]["ingredientName"] == "Egg"
    assert data["nutrition"]["total"]["kcal"] == 171.6
    assert data["nutrition"]["perServing"]["kcal"] == 85.8


async def test_foreign_recipe_is_not_found(client, cook, make_user, make_ingredient, make_recipe):
    egg = await make_ingredient("Egg", 143)
    recipe_id = await make_recipe(cook, egg)
    _, other = await make_user("other@example.com")

    resp = await client.get(f"/api/v1/recipes/{recipe_id}", headers=other)
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"

    resp = await client.get("/api/v1/recipes/missing", headers=cook)
    assert resp.status_code == 404


async def test_totals_follow_ingredient_edits(client, make_user, make_ingredient, make_recipe):
    _, admin = await make_user("admin@example.com", role=Role.ADMIN)
    chicken = await make_ingredient("Chicken Breast", 165)
    recipe_id = await make_recipe(admin, chicken, quantity_g=200, servings=2)

    resp = await client.patch(f"/api/v1/ingredients/{chicken}", headers=admin, json={"kcalPer100g": 120})
    assert resp.status_code == 200

    resp = await client.get(f"/api/v1/recipes/{recipe_id}", headers=admin)
    assert resp.json()["nutrition"]["total"]["kcal"] == 240.0
    assert resp.json()["nutrition"]["perServing"]["kcal"] == 120.0


async def test_created_at_is_utc_everywhere(client, cook, make_ingredient):
    egg = await make_ingredient("Egg", 143)
    resp = await client.post("/api/v1/recipes", headers=cook, json={
        "name": "Omelette",
        "servings": 1,
        "items": [{"ingredientId": egg, "quantityG": 120}],
    })
    created = resp.json()["recipe"]
    listed = (await client.get("/api/v1/recipes", headers=cook)).json()[0]
    detail = (await client.get(f"/api/v1/recipes/{created['id']}", headers=cook)).json()

    assert created["createdAt"] == listed["createdAt"] == detail["createdAt"]
    parsed = datetime.fromisoformat(listed["createdAt"].replace("Z", "+00:00"))
    assert parsed.utcoffset() == timedelta(0)
