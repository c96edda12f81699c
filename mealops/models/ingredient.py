"""Ingredient catalog models. Macro values are per 100 g."""
from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from mealops.models.base import CamelModel, UTCDateTime


class IngredientCreate(CamelModel):
    name: str = Field(..., max_length=200)
    kcal_per_100g: float = Field(..., ge=0, alias="kcalPer100g")
    protein_per_100g: float = Field(..., ge=0, alias="proteinPer100g")
    carbs_per_100g: float = Field(..., ge=0, alias="carbsPer100g")
    fat_per_100g: float = Field(..., ge=0, alias="fatPer100g")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class IngredientUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=200)
    kcal_per_100g: Optional[float] = Field(None, ge=0, alias="kcalPer100g")
    protein_per_100g: Optional[float] = Field(None, ge=0, alias="proteinPer100g")
    carbs_per_100g: Optional[float] = Field(None, ge=0, alias="carbsPer100g")
    fat_per_100g: Optional[float] = Field(None, ge=0, alias="fatPer100g")

    @field_validator(
        "name", "kcal_per_100g", "protein_per_100g", "carbs_per_100g", "fat_per_100g", mode="before",
    )
    @classmethod
    def _reject_null(cls, v):
        # Omit a field to leave it unchanged; null is never a valid value
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class IngredientOut(CamelModel):
    id: str
    name: str
    kcal_per_100g: float = Field(alias="kcalPer100g")
    protein_per_100g: float = Field(alias="proteinPer100g")
    carbs_per_100g: float = Field(alias="carbsPer100g")
    fat_per_100g: float = Field(alias="fatPer100g")
    created_at: Optional[UTCDateTime] = None
