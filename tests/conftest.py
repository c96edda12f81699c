"""Shared test fixtures — a fresh in-memory database per test."""
from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

import mealops.db.engine as _engine_mod
import mealops.db.meal_plan_tables  # noqa: F401
import mealops.db.user_tables  # noqa: F401
from mealops.api.main import app
from mealops.auth import create_tokens
from mealops.db.engine import build_engine, build_sessionmaker, get_session
from mealops.db.tables import Base, IngredientRow
from mealops.db.user_tables import UserRow
from mealops.middleware.rate_limit import reset_store
from mealops.models import Role


@pytest_asyncio.fixture(autouse=True)
async def session_factory(monkeypatch):
    """Create tables before each test, drop after. Yields the test sessionmaker."""
    test_engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    TestSession = build_sessionmaker(test_engine)

    async def override_get_session():
        async with TestSession() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    monkeypatch.setattr(_engine_mod, "engine", test_engine)
    monkeypatch.setattr(_engine_mod, "async_session", TestSession)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield TestSession

    # Reset rate limiter between tests
    reset_store()
    app.dependency_overrides.pop(get_session, None)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(session_factory):
    """Insert a user directly and return ``(user_id, auth_headers)``.

    Skips the register endpoint so tests don't pay for password hashing or
    hit the auth rate limit.
    """
    async def _make(email: str = "cook@example.com", role: Role = Role.USER):
        async with session_factory() as session:
            user = UserRow(email=email, password_hash="x$y", role=role)
            session.add(user)
            await session.commit()
            user_id = user.id
        token = create_tokens(user_id)["access_token"]
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def make_ingredient(session_factory):
    async def _make(name: str, kcal: float, protein: float = 0, carbs: float = 0, fat: float = 0) -> str:
        async with session_factory() as session:
            row = IngredientRow(
                name=name,
                kcal_per_100g=kcal,
                protein_per_100g=protein,
                carbs_per_100g=carbs,
                fat_per_100g=fat,
            )
            session.add(row)
            await session.commit()
            return row.id

    return _make


@pytest.fixture
def make_recipe(client):
    """Create a recipe through the API and return its id."""
    async def _make(headers: dict, ingredient_id: str, name: str = "Chicken Bowl",
                    quantity_g: float = 200, servings: int = 2) -> str:
        resp = await client.post("/api/v1/recipes", headers=headers, json={
            "name": name,
            "servings": servings,
            "items": [{"ingredientId": ingredient_id, "quantityG": quantity_g}],
        })
        assert resp.status_code == 201, resp.text
        return resp.json()["recipe"]["id"]

    return _make
