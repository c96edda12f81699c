"""Ingredient catalog routes. Reading is public, writing needs an admin."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.auth import require_admin
from mealops.db.engine import get_session
from mealops.db.user_tables import UserRow
from mealops.models import IngredientCreate, IngredientOut, IngredientUpdate
from mealops.services.ingredients import IngredientService

router = APIRouter(prefix="/api/v1/ingredients", tags=["ingredients"])


@router.get("", response_model=list[IngredientOut])
async def list_ingredients(session: AsyncSession = Depends(get_session)):
    return await IngredientService(session).list()


@router.post("", response_model=IngredientOut, status_code=201)
async def create_ingredient(
    req: IngredientCreate,
    _admin: UserRow = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    return await IngredientService(session).create(req)


@router.patch("/{ingredient_id}", response_model=IngredientOut)
async def update_ingredient(
    ingredient_id: str,
    req: IngredientUpdate,
    _admin: UserRow = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """Edit name or macros. Totals of recipes using the ingredient change with it."""
    return await IngredientService(session).update(ingredient_id, req)


@router.delete("/{ingredient_id}", status_code=204)
async def delete_ingredient(
    ingredient_id: str,
    _admin: UserRow = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """Delete an unused ingredient; 409 while any recipe references it."""
    await IngredientService(session).delete(ingredient_id)
    return Response(status_code=204)
