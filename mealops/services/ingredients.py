"""Ingredient catalog — admin-curated list of foods with macros per 100 g."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.db.repository import IngredientRepository
from mealops.db.tables import IngredientRow
from mealops.errors import Conflict, NotFound
from mealops.models import IngredientCreate, IngredientOut, IngredientUpdate

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Ingredient name already exists"


class IngredientService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.ingredients = IngredientRepository(session)

    async def list(self) -> list[IngredientOut]:
        return [IngredientOut.model_validate(row) for row in await self.ingredients.list_all()]

    async def create(self, req: IngredientCreate) -> IngredientOut:
        row = IngredientRow(**req.model_dump())
        try:
            await self.ingredients.add(row)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict(DUPLICATE_NAME)
        logger.info("Created ingredient %s (%s)", row.id, row.name)
        return IngredientOut.model_validate(row)

    async def update(self, ingredient_id: str, req: IngredientUpdate) -> IngredientOut:
        """Partial update. Recipe totals follow automatically since they are computed on read."""
        row = await self._get_or_404(ingredient_id)
        for field, value in req.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict(DUPLICATE_NAME)
        logger.info("Updated ingredient %s", ingredient_id)
        return IngredientOut.model_validate(row)

    async def delete(self, ingredient_id: str) -> None:
        row = await self._get_or_404(ingredient_id)
        if await self.ingredients.count_references(ingredient_id):
            raise Conflict("Ingredient is already used in recipes and cannot be deleted")
        try:
            await self.ingredients.delete(row)
            await self.session.commit()
        except IntegrityError:
            # A recipe picked it up between the check and the delete
            await self.session.rollback()
            raise Conflict("Ingredient is already used in recipes and cannot be deleted")
        logger.info("Deleted ingredient %s", ingredient_id)

    async def _get_or_404(self, ingredient_id: str) -> IngredientRow:
        row = await self.ingredients.get(ingredient_id)
        if row is None:
            raise NotFound("Ingredient not found")
        return row
