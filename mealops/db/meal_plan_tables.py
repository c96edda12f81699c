"""Meal plan database tables."""
from __future__ import annotations

from sqlalchemy import (
    Column, String, Date, DateTime, ForeignKey, Index, UniqueConstraint
)

from mealops.db.tables import Base, _now, _uuid


class MealPlanRow(Base):
    """One user's plan for the 7 days starting at ``week_start``."""
    __tablename__ = "meal_plans"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_meal_plan_user_week"),
    )


class PlannedMealRow(Base):
    """A recipe assigned to one (date, slot) of a plan."""
    __tablename__ = "planned_meals"

    id = Column(String(36), primary_key=True, default=_uuid)
    plan_id = Column(String(36), ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    slot = Column(String(32), nullable=False)  # breakfast, lunch, afternoon_snack, dinner
    recipe_id = Column(String(36), ForeignKey("recipes.id", ondelete="RESTRICT"), nullable=False)

    __table_args__ = (
        Index("ix_planned_meals_plan_date", "plan_id", "date"),
        UniqueConstraint("plan_id", "date", "slot", name="uq_planned_meal_slot"),
    )
