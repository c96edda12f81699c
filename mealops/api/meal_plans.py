"""Weekly meal plan routes.

GET reads one week; PUT replaces the whole week in one shot.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.auth import require_user
from mealops.db.engine import get_session
from mealops.db.user_tables import UserRow
from mealops.models import MealPlanOut, MealPlanSave
from mealops.services.meal_plans import MealPlanService

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])


@router.get("", response_model=MealPlanOut)
async def get_meal_plan(
    week_start: Optional[str] = Query(None, alias="weekStart", description="YYYY-MM-DD; defaults to this week's Monday"),
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    return await MealPlanService(session).get_week(user.id, week_start)


@router.put("", response_model=MealPlanOut)
async def save_meal_plan(
    req: MealPlanSave,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Replace every meal of the week; an empty ``meals`` list clears it."""
    return await MealPlanService(session).save_week(user.id, req)
