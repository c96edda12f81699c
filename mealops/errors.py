"""Domain errors raised by services and rendered by the API error handler.

Each error carries an HTTP status and a short machine-readable code; the
message is meant for the end user.
"""
from __future__ import annotations


class MealOpsError(Exception):
    status_code = 500
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(MealOpsError):
    status_code = 400
    code = "invalid_input"


class InvalidDate(InvalidInput):
    code = "invalid_date"


class DateOutsideWeek(InvalidInput):
    code = "date_outside_week"

    def __init__(self, date_str: str):
        super().__init__(f"Meal date is outside selected week: {date_str}")
        self.date = date_str


class DuplicateSlot(InvalidInput):
    code = "duplicate_slot"

    def __init__(self, date_str: str, slot: str):
        super().__init__(f"Duplicate slot for date {date_str}")
        self.date = date_str
        self.slot = slot


class UnknownOrForeignRecipe(InvalidInput):
    # Deliberately does not say which ids failed
    code = "unknown_recipe"

    def __init__(self):
        super().__init__("One or more recipes were not found for this user")


class UnknownIngredient(InvalidInput):
    code = "unknown_ingredient"

    def __init__(self, ingredient_id: str):
        super().__init__(f"Unknown ingredientId: {ingredient_id}")
        self.ingredient_id = ingredient_id


class NotFound(MealOpsError):
    status_code = 404
    code = "not_found"


class Conflict(MealOpsError):
    status_code = 409
    code = "conflict"


class Unauthorized(MealOpsError):
    status_code = 401
    code = "unauthorized"


class Forbidden(MealOpsError):
    status_code = 403
    code = "forbidden"
