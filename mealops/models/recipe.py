"""Recipe request/response models."""
from __future__ import annotations

from typing import Optional

from pydantic import Field

from mealops.models.base import CamelModel, UTCDateTime
from mealops.models.nutrition import NutritionSummary


class RecipeItemIn(CamelModel):
    ingredient_id: str = Field(..., min_length=1)
    quantity_g: float = Field(..., gt=0)


class RecipeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    servings: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=5000)
    items: list[RecipeItemIn] = Field(..., min_length=1)


class RecipeItemOut(CamelModel):
    id: str
    ingredient_id: str
    ingredient_name: Optional[str] = None
    quantity_g: float


class RecipeOut(CamelModel):
    id: str
    name: str
    servings: int
    notes: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    items: list[RecipeItemOut] = []


class RecipeCreated(CamelModel):
    recipe: RecipeOut
    nutrition: NutritionSummary


class RecipeSummary(CamelModel):
    """One row of the recipe list — no items, nutrition computed on read."""
    id: str
    name: str
    servings: int
    notes: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    nutrition: NutritionSummary


class RecipeDetail(RecipeOut):
    nutrition: NutritionSummary
