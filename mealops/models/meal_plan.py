"""Weekly meal plan models."""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from mealops.models.base import CamelModel


class MealSlot(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    AFTERNOON_SNACK = "afternoon_snack"
    DINNER = "dinner"


# Display order within a day
SLOT_ORDER: tuple[str, ...] = tuple(s.value for s in MealSlot)


class PlannedMealIn(CamelModel):
    # Kept as a string: the date-only format is checked by the planner, not pydantic
    date: str
    slot: MealSlot
    recipe_id: str = Field(..., min_length=1)


class MealPlanSave(CamelModel):
    week_start: str
    meals: list[PlannedMealIn] = []


class PlannedMealOut(CamelModel):
    date: str
    slot: str
    recipe_id: str
    recipe_name: str


class MealPlanOut(CamelModel):
    id: Optional[str] = None
    week_start: str
    meals: list[PlannedMealOut] = []
