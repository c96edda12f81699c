"""Weekly meal plan reconciliation.

A save always carries the complete week. The planner validates every
proposed (date, slot, recipe) assignment up front and then swaps the stored
week for the new one inside a single transaction: meals are never diffed, so
readers see either the old week or the new week, nothing in between.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.db.repository import MealPlanRepository, RecipeRepository
from mealops.errors import (
    Conflict,
    DateOutsideWeek,
    DuplicateSlot,
    InvalidDate,
    UnknownOrForeignRecipe,
)
from mealops.models import SLOT_ORDER, MealPlanOut, MealPlanSave, PlannedMealIn, PlannedMealOut
from mealops.services.dates import format_date_only, is_within_week, parse_date_only, week_start_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatedMeal:
    date: date
    slot: str
    recipe_id: str

    def as_row(self) -> dict:
        return {"date": self.date, "slot": self.slot, "recipe_id": self.recipe_id}


def slot_rank(slot: str) -> int:
    """Position of ``slot`` in the day; unknown slots sort after dinner."""
    try:
        return SLOT_ORDER.index(slot)
    except ValueError:
        return len(SLOT_ORDER)


def sort_meals(meals: Iterable[PlannedMealOut]) -> list[PlannedMealOut]:
    # Zero-padded ISO dates sort lexically in calendar order
    return sorted(meals, key=lambda m: (m.date, slot_rank(m.slot)))


def parse_week_start(value: str) -> date:
    week_start = parse_date_only(value)
    if week_start is None:
        raise InvalidDate("weekStart must be YYYY-MM-DD")
    return week_start


def validate_week(week_start_raw: str, meals: list[PlannedMealIn]) -> tuple[date, list[ValidatedMeal]]:
    """Check dates and slot uniqueness without touching the database.

    Raises InvalidDate, DateOutsideWeek or DuplicateSlot on the first offending meal.
    """
    week_start = parse_week_start(week_start_raw)

    validated: list[ValidatedMeal] = []
    for meal in meals:
        meal_date = parse_date_only(meal.date)
        if meal_date is None:
            raise InvalidDate(f"Meal date must be YYYY-MM-DD: {meal.date}")
        if not is_within_week(meal_date, week_start):
            raise DateOutsideWeek(meal.date)
        validated.append(ValidatedMeal(date=meal_date, slot=meal.slot.value, recipe_id=meal.recipe_id))

    seen: set[tuple[date, str]] = set()
    for meal in validated:
        key = (meal.date, meal.slot)
        if key in seen:
            raise DuplicateSlot(format_date_only(meal.date), meal.slot)
        seen.add(key)

    return week_start, validated


class MealPlanService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.plans = MealPlanRepository(session)
        self.recipes = RecipeRepository(session)

    async def get_week(self, user_id: str, week_start_raw: Optional[str] = None) -> MealPlanOut:
        """The stored week, or an empty plan with ``id=None`` if nothing was saved yet.

        Without ``week_start_raw`` the current week (Monday start) is used.
        """
        if week_start_raw is None:
            week_start = week_start_for(datetime.now(timezone.utc).date())
            week_start_raw = format_date_only(week_start)
        else:
            week_start = parse_week_start(week_start_raw)

        plan = await self.plans.find(user_id, week_start)
        if plan is None:
            return MealPlanOut(id=None, week_start=week_start_raw, meals=[])
        return MealPlanOut(
            id=plan.id,
            week_start=week_start_raw,
            meals=await self._load_meals(plan.id),
        )

    async def save_week(self, user_id: str, req: MealPlanSave) -> MealPlanOut:
        """Replace the whole week with ``req.meals``; an empty list clears it."""
        try:
            week_start, meals = validate_week(req.week_start, req.meals)
        except (InvalidDate, DateOutsideWeek, DuplicateSlot) as exc:
            logger.info("Meal plan rejected for user %s: %s", user_id, exc.message)
            raise

        recipe_ids = {meal.recipe_id for meal in meals}
        if recipe_ids and await self.recipes.count_owned(user_id, recipe_ids) != len(recipe_ids):
            logger.info("Meal plan rejected for user %s: unknown or foreign recipe", user_id)
            raise UnknownOrForeignRecipe()

        try:
            plan = await self.plans.get_or_create(user_id, week_start)
            await self.plans.replace_meals(plan, [meal.as_row() for meal in meals])
            await self.session.commit()
        except IntegrityError:
            # Another save for the same week created the plan first
            await self.session.rollback()
            logger.warning("Concurrent meal plan save for user %s week %s", user_id, req.week_start)
            raise Conflict("Meal plan was modified concurrently, please retry")

        logger.info(
            "Saved meal plan %s for user %s week %s (%d meals)",
            plan.id, user_id, format_date_only(week_start), len(meals),
        )
        return MealPlanOut(
            id=plan.id,
            week_start=format_date_only(week_start),
            meals=await self._load_meals(plan.id),
        )

    async def _load_meals(self, plan_id: str) -> list[PlannedMealOut]:
        rows = await self.plans.meals_with_recipe_names(plan_id)
        return sort_meals(
            PlannedMealOut(
                date=format_date_only(meal.date),
                slot=meal.slot,
                recipe_id=meal.recipe_id,
                recipe_name=recipe_name,
            )
            for meal, recipe_name in rows
        )
