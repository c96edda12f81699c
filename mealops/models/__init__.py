"""Pydantic models — the typed request/response contract of the API."""
from mealops.models.ingredient import IngredientCreate, IngredientOut, IngredientUpdate
from mealops.models.meal_plan import (
    SLOT_ORDER,
    MealPlanOut,
    MealPlanSave,
    MealSlot,
    PlannedMealIn,
    PlannedMealOut,
)
from mealops.models.nutrition import Nutrition, NutritionSummary
from mealops.models.recipe import (
    RecipeCreate,
    RecipeCreated,
    RecipeDetail,
    RecipeItemIn,
    RecipeItemOut,
    RecipeOut,
    RecipeSummary,
)
from mealops.models.user import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    Role,
    RoleUpdate,
    UserOut,
)

__all__ = [
    "AuthResponse",
    "IngredientCreate",
    "IngredientOut",
    "IngredientUpdate",
    "LoginRequest",
    "MealPlanOut",
    "MealPlanSave",
    "MealSlot",
    "Nutrition",
    "NutritionSummary",
    "PlannedMealIn",
    "PlannedMealOut",
    "RecipeCreate",
    "RecipeCreated",
    "RecipeDetail",
    "RecipeItemIn",
    "RecipeItemOut",
    "RecipeOut",
    "RecipeSummary",
    "RefreshRequest",
    "RegisterRequest",
    "Role",
    "RoleUpdate",
    "SLOT_ORDER",
    "UserOut",
]
