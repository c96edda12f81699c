"""SQLAlchemy ORM models for the ingredient catalog and recipes."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, Text, DateTime, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class IngredientRow(Base):
    """Catalog ingredient with macro values per 100 g."""
    __tablename__ = "ingredients"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(200), nullable=False, unique=True)
    kcal_per_100g = Column(Float, nullable=False)
    protein_per_100g = Column(Float, nullable=False)
    carbs_per_100g = Column(Float, nullable=False)
    fat_per_100g = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now)


class RecipeRow(Base):
    __tablename__ = "recipes"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    servings = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    items = relationship(
        "RecipeItemRow",
        order_by="RecipeItemRow.position",
        cascade="all, delete-orphan",
        back_populates="recipe",
    )

    __table_args__ = (
        Index("ix_recipes_user_created", "user_id", "created_at"),
    )


class RecipeItemRow(Base):
    """Weighed ingredient line of a recipe."""
    __tablename__ = "recipe_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    recipe_id = Column(String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    # RESTRICT: a referenced ingredient cannot disappear from under a recipe
    ingredient_id = Column(
        String(36), ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity_g = Column(Float, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    recipe = relationship("RecipeRow", back_populates="items")
    ingredient = relationship("IngredientRow")

    __table_args__ = (
        UniqueConstraint("recipe_id", "position", name="uq_recipe_item_position"),
    )
