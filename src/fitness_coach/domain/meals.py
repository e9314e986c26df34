"""Domain models for parsed and logged meals."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Meal slot of the day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @classmethod
    def parse(cls, value: object) -> "MealType | None":
        """Return the matching meal type, or None for unknown values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ExtractedFoodItem:
    """Food item as extracted from model output, before resolution."""

    name: str
    quantity: float
    unit: str
    confidence: float


@dataclass(frozen=True)
class ParsedFoodItem:
    """Food item resolved against the catalog."""

    food_name: str
    quantity: float
    unit: str
    confidence: float
    ai_generated: bool
    food_id: UUID | None = None


@dataclass(frozen=True)
class ParsedMeal:
    """Meal parsed from text or photo, pending user confirmation."""

    meal_type: MealType
    logged_at: datetime
    items: list[ParsedFoodItem]
    confidence: float
    needs_confirmation: bool


@dataclass(frozen=True)
class MealEntry:
    """Catalog food reference with a portion, used to log a meal."""

    food_id: UUID
    quantity: float
    unit: str


@dataclass(frozen=True)
class MealAdjustments:
    """User edits applied when confirming a parsed meal."""

    meal_type: MealType | None = None
    name: str | None = None
    notes: str | None = None
    consumed_at: datetime | None = None
    items: list[ParsedFoodItem] | None = None


@dataclass(frozen=True)
class MealFoodItem:
    """Logged food portion with computed macros."""

    food_id: UUID
    food_name: str
    quantity: float
    unit: str
    calories: float
    protein: float
    carbohydrates: float
    fat: float


@dataclass(frozen=True)
class Meal:
    """Persisted meal with denormalized totals."""

    id: UUID
    user_id: UUID
    name: str
    meal_type: MealType
    consumed_at: datetime
    total_calories: float
    total_protein: float
    total_carbohydrates: float
    total_fat: float
    items: list[MealFoodItem]
    notes: str | None = None
