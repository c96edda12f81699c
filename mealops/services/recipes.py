"""Recipe creation and listing with on-the-fly nutrition."""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mealops.db.repository import IngredientRepository, RecipeRepository
from mealops.db.tables import RecipeItemRow, RecipeRow
from mealops.errors import NotFound, UnknownIngredient
from mealops.models import (
    NutritionSummary,
    RecipeCreate,
    RecipeCreated,
    RecipeDetail,
    RecipeItemOut,
    RecipeOut,
    RecipeSummary,
)
from mealops.services.nutrition import summarize

logger = logging.getLogger(__name__)


def _recipe_nutrition(row: RecipeRow) -> NutritionSummary:
    return summarize(((item.ingredient, item.quantity_g) for item in row.items), row.servings)


def _item_out(item: RecipeItemRow) -> RecipeItemOut:
    return RecipeItemOut(
        id=item.id,
        ingredient_id=item.ingredient_id,
        ingredient_name=item.ingredient.name if item.ingredient is not None else None,
        quantity_g=item.quantity_g,
    )


def _recipe_out(row: RecipeRow) -> RecipeOut:
    return RecipeOut(
        id=row.id,
        name=row.name,
        servings=row.servings,
        notes=row.notes,
        created_at=row.created_at,
        items=[_item_out(item) for item in row.items],
    )


class RecipeService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.recipes = RecipeRepository(session)
        self.ingredients = IngredientRepository(session)

    async def create(self, user_id: str, req: RecipeCreate) -> RecipeCreated:
        """Validate every ingredient id, then persist the recipe and its items in one commit."""
        ingredient_ids = list(dict.fromkeys(item.ingredient_id for item in req.items))
        found = await self.ingredients.find_many(ingredient_ids)
        for item in req.items:
            if item.ingredient_id not in found:
                logger.info("Recipe rejected for user %s: unknown ingredient %s", user_id, item.ingredient_id)
                raise UnknownIngredient(item.ingredient_id)

        row = RecipeRow(
            user_id=user_id,
            name=req.name,
            servings=req.servings,
            notes=(req.notes or "").strip() or None,
            items=[
                RecipeItemRow(
                    ingredient_id=item.ingredient_id,
                    ingredient=found[item.ingredient_id],
                    quantity_g=item.quantity_g,
                    position=position,
                )
                for position, item in enumerate(req.items)
            ],
        )
        await self.recipes.add(row)
        await self.session.commit()
        logger.info("Created recipe %s for user %s (%d items)", row.id, user_id, len(row.items))

        return RecipeCreated(recipe=_recipe_out(row), nutrition=_recipe_nutrition(row))

    async def list(self, user_id: str) -> list[RecipeSummary]:
        rows = await self.recipes.list_for_owner(user_id)
        return [
            RecipeSummary(
                id=row.id,
                name=row.name,
                servings=row.servings,
                notes=row.notes,
                created_at=row.created_at,
                nutrition=_recipe_nutrition(row),
            )
            for row in rows
        ]

    async def get(self, user_id: str, recipe_id: str) -> RecipeDetail:
        row = await self.recipes.get_owned(user_id, recipe_id)
        if row is None:
            # Foreign recipes look exactly like missing ones
            raise NotFound("Recipe not found")
        return RecipeDetail(**_recipe_out(row).model_dump(), nutrition=_recipe_nutrition(row))
