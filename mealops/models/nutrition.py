"""Nutrition value models."""
from __future__ import annotations

from mealops.models.base import CamelModel


class Nutrition(CamelModel):
    kcal: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


class NutritionSummary(CamelModel):
    total: Nutrition
    per_serving: Nutrition
