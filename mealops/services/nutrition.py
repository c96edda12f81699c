"""Nutrition aggregation — per-100g macros scaled by weighed quantities.

Pure arithmetic: no validation (servings >= 1 is guaranteed by the request
models) and no I/O. Totals are never persisted; every read recomputes them
from the current ingredient values.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

from mealops.models import Nutrition, NutritionSummary

_TENTH = Decimal("0.1")


class MacroSource(Protocol):
    """Anything exposing macro values per 100 g (ORM row or API model)."""
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float


def add(a: Nutrition, b: Nutrition) -> Nutrition:
    return Nutrition(
        kcal=a.kcal + b.kcal,
        protein=a.protein + b.protein,
        carbs=a.carbs + b.carbs,
        fat=a.fat + b.fat,
    )


def round1(value: float) -> float:
    """Round to one decimal, halves away from zero (1.25 -> 1.3, -1.25 -> -1.3)."""
    return float(Decimal(repr(value)).quantize(_TENTH, rounding=ROUND_HALF_UP))


def round_nutrition(n: Nutrition) -> Nutrition:
    return Nutrition(
        kcal=round1(n.kcal),
        protein=round1(n.protein),
        carbs=round1(n.carbs),
        fat=round1(n.fat),
    )


def item_nutrition(ingredient: MacroSource, quantity_g: float) -> Nutrition:
    factor = quantity_g / 100
    return Nutrition(
        kcal=ingredient.kcal_per_100g * factor,
        protein=ingredient.protein_per_100g * factor,
        carbs=ingredient.carbs_per_100g * factor,
        fat=ingredient.fat_per_100g * factor,
    )


def per_serving(total: Nutrition, servings: int) -> Nutrition:
    return Nutrition(
        kcal=total.kcal / servings,
        protein=total.protein / servings,
        carbs=total.carbs / servings,
        fat=total.fat / servings,
    )


def aggregate(items: Iterable[tuple[MacroSource, float]]) -> Nutrition:
    """Unrounded recipe totals for (ingredient, grams) pairs."""
    total = Nutrition()
    for ingredient, quantity_g in items:
        total = add(total, item_nutrition(ingredient, quantity_g))
    return total


def summarize(items: Iterable[tuple[MacroSource, float]], servings: int) -> NutritionSummary:
    """Rounded totals and per-serving values for display."""
    total = aggregate(items)
    return NutritionSummary(
        total=round_nutrition(total),
        per_serving=round_nutrition(per_serving(total, servings)),
    )
