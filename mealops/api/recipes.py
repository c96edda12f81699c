"""Recipe routes — always scoped to the authenticated owner."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.auth import require_user
from mealops.db.engine import get_session
from mealops.db.user_tables import UserRow
from mealops.models import RecipeCreate, RecipeCreated, RecipeDetail, RecipeSummary
from mealops.services.recipes import RecipeService

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.post("", response_model=RecipeCreated, status_code=201)
async def create_recipe(
    req: RecipeCreate,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Create a recipe from weighed ingredients; responds with its nutrition."""
    return await RecipeService(session).create(user.id, req)


@router.get("", response_model=list[RecipeSummary])
async def list_recipes(
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """The caller's recipes, newest first, with totals from current ingredient values."""
    return await RecipeService(session).list(user.id)


@router.get("/{recipe_id}", response_model=RecipeDetail)
async def get_recipe(
    recipe_id: str,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    return await RecipeService(session).get(user.id, recipe_id)
