"""Repositories — async DB access per aggregate, each bound to an injected session.

Repositories only flush; committing (and therefore the transaction boundary)
belongs to the service that orchestrates them.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import case, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mealops.db.meal_plan_tables import MealPlanRow, PlannedMealRow
from mealops.db.tables import IngredientRow, RecipeItemRow, RecipeRow
from mealops.db.user_tables import UserRow
from mealops.models import Role


class IngredientRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[IngredientRow]:
        result = await self.session.execute(select(IngredientRow).order_by(IngredientRow.name))
        return list(result.scalars())

    async def get(self, ingredient_id: str) -> Optional[IngredientRow]:
        return await self.session.get(IngredientRow, ingredient_id)

    async def find_many(self, ingredient_ids: Iterable[str]) -> dict[str, IngredientRow]:
        """Batched lookup keyed by id; missing ids are simply absent."""
        ids = list(ingredient_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(IngredientRow).where(IngredientRow.id.in_(ids)))
        return {row.id: row for row in result.scalars()}

    async def add(self, row: IngredientRow) -> IngredientRow:
        self.session.add(row)
        await self.session.flush()
        return row

    async def count_references(self, ingredient_id: str) -> int:
        stmt = select(func.count(RecipeItemRow.id)).where(RecipeItemRow.ingredient_id == ingredient_id)
        return (await self.session.execute(stmt)).scalar() or 0

    async def delete(self, row: IngredientRow) -> None:
        await self.session.delete(row)
        await self.session.flush()


class RecipeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, row: RecipeRow) -> RecipeRow:
        self.session.add(row)
        await self.session.flush()
        return row

    async def list_for_owner(self, user_id: str) -> list[RecipeRow]:
        """Owner's recipes, newest first, with items and their ingredients loaded."""
        stmt = (
            select(RecipeRow)
            .where(RecipeRow.user_id == user_id)
            .options(selectinload(RecipeRow.items).selectinload(RecipeItemRow.ingredient))
            .order_by(RecipeRow.created_at.desc(), RecipeRow.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def get_owned(self, user_id: str, recipe_id: str) -> Optional[RecipeRow]:
        stmt = (
            select(RecipeRow)
            .where(RecipeRow.id == recipe_id, RecipeRow.user_id == user_id)
            .options(selectinload(RecipeRow.items).selectinload(RecipeItemRow.ingredient))
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def count_owned(self, user_id: str, recipe_ids: Iterable[str]) -> int:
        """How many of ``recipe_ids`` exist and belong to ``user_id`` (one query)."""
        ids = list(recipe_ids)
        if not ids:
            return 0
        stmt = select(func.count(RecipeRow.id)).where(RecipeRow.user_id == user_id, RecipeRow.id.in_(ids))
        return (await self.session.execute(stmt)).scalar() or 0


class MealPlanRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self, user_id: str, week_start: date) -> Optional[MealPlanRow]:
        stmt = select(MealPlanRow).where(MealPlanRow.user_id == user_id, MealPlanRow.week_start == week_start)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def get_or_create(self, user_id: str, week_start: date) -> MealPlanRow:
        plan = await self.find(user_id, week_start)
        if plan is None:
            plan = MealPlanRow(user_id=user_id, week_start=week_start)
            self.session.add(plan)
            await self.session.flush()
        return plan

    async def replace_meals(self, plan: MealPlanRow, meals: list[dict]) -> None:
        """Delete every meal of ``plan`` and bulk-insert ``meals`` (dicts of date/slot/recipe_id)."""
        await self.session.execute(delete(PlannedMealRow).where(PlannedMealRow.plan_id == plan.id))
        if meals:
            await self.session.execute(
                insert(PlannedMealRow),
                [{"plan_id": plan.id, **meal} for meal in meals],
            )
        plan.updated_at = datetime.now(timezone.utc)
        await self.session.flush()

    async def meals_with_recipe_names(self, plan_id: str) -> list[tuple[PlannedMealRow, str]]:
        stmt = (
            select(PlannedMealRow, RecipeRow.name)
            .join(RecipeRow, PlannedMealRow.recipe_id == RecipeRow.id)
            .where(PlannedMealRow.plan_id == plan_id)
        )
        result = await self.session.execute(stmt)
        return [(meal, name) for meal, name in result.all()]


def admin_rows_for_update():
    """Ids of all admins, row-locked until the surrounding transaction ends."""
    return select(UserRow.id).where(UserRow.role == Role.ADMIN).with_for_update()


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Optional[UserRow]:
        return await self.session.get(UserRow, user_id)

    async def get_by_email(self, email: str) -> Optional[UserRow]:
        stmt = select(UserRow).where(func.lower(UserRow.email) == email.lower())
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def add(self, row: UserRow) -> UserRow:
        self.session.add(row)
        await self.session.flush()
        return row

    async def count_admins(self) -> int:
        stmt = select(func.count(UserRow.id)).where(UserRow.role == Role.ADMIN)
        return (await self.session.execute(stmt)).scalar() or 0

    async def list_all(self) -> list[UserRow]:
        """Admins first, then oldest accounts first."""
        admin_first = case((UserRow.role == Role.ADMIN, 0), else_=1)
        stmt = select(UserRow).order_by(admin_first, UserRow.created_at, UserRow.email)
        return list((await self.session.execute(stmt)).scalars())

    async def demote_unless_last_admin(self, user_id: str) -> int:
        """Demote an admin only while another admin exists.

        Every admin row is locked first (SELECT ... FOR UPDATE), so concurrent
        demotions of different admins queue behind each other and the second
        one re-reads the admin set after the first commits. Returns the number
        of rows changed (0 means the guard refused).
        """
        locked = await self.session.execute(admin_rows_for_update())
        admin_ids = set(locked.scalars())
        if user_id not in admin_ids or len(admin_ids) < 2:
            return 0
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id, UserRow.role == Role.ADMIN)
            .values(role=Role.USER)
            .execution_options(synchronize_session=False)
        )
        return (await self.session.execute(stmt)).rowcount
