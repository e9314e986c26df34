"""Meal confirmation and logging service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from fitness_coach.domain.errors import InvalidInputError, NotFoundError
from fitness_coach.domain.foods import Food
from fitness_coach.domain.meals import (
    Meal,
    MealAdjustments,
    MealEntry,
    MealFoodItem,
    MealType,
    ParsedMeal,
)
from fitness_coach.domain.nutrition import ZERO_MACROS, MacroProfile
from fitness_coach.services.foods import FoodRepository

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def create_meal(self, meal: Meal) -> UUID:
        """Persist a meal with its items and return its id."""

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals consumed in ``[start, end)``, newest first."""


@dataclass
class MealService:
    """Computes portion macros and persists meals."""

    foods: FoodRepository
    repository: MealRepository

    def confirm_parsed_meal(
        self,
        user_id: UUID,
        parsed_meal: ParsedMeal,
        adjustments: MealAdjustments | None = None,
    ) -> Meal:
        """Persist a parsed meal after applying the user's adjustments."""
        adjustments = adjustments or MealAdjustments()
        items = parsed_meal.items if adjustments.items is None else adjustments.items
        entries = []
        for item in items:
            if item.food_id is None:
                raise InvalidInputError(f"food item {item.food_name!r} has no food_id")
            entries.append(
                MealEntry(food_id=item.food_id, quantity=item.quantity, unit=item.unit)
            )
        return self.log_meal(
            user_id,
            adjustments.meal_type or parsed_meal.meal_type,
            entries,
            consumed_at=adjustments.consumed_at or parsed_meal.logged_at,
            name=adjustments.name,
            notes=adjustments.notes,
        )

    def log_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: MealType,
        entries: list[MealEntry],
        consumed_at: datetime | None = None,
        name: str | None = None,
        notes: str | None = None,
    ) -> Meal:
        """Compute macros for catalog portions and persist the meal."""
        if not entries:
            raise InvalidInputError("a meal needs at least one food item")

        items = [self._build_item(entry) for entry in entries]
        total = ZERO_MACROS
        for item in items:
            total = total + MacroProfile(
                calories=item.calories,
                protein=item.protein,
                carbohydrates=item.carbohydrates,
                fat=item.fat,
            )
        meal = Meal(
            id=uuid4(),
            user_id=user_id,
            name=name or meal_type.value.capitalize(),
            meal_type=meal_type,
            consumed_at=consumed_at or datetime.now(UTC),
            total_calories=total.calories,
            total_protein=total.protein,
            total_carbohydrates=total.carbohydrates,
            total_fat=total.fat,
            items=items,
            notes=notes,
        )
        meal_id = self.repository.create_meal(meal)
        _logger.info(
            "Logged meal %s for user %s: %s items, %.0f kcal",
            meal_id,
            user_id,
            len(items),
            meal.total_calories,
        )
        return meal if meal_id == meal.id else replace(meal, id=meal_id)

    def list_recent_meals(self, user_id: UUID, days: int) -> list[Meal]:
        """Return meals consumed in the last ``days`` days, newest first."""
        if days <= 0:
            raise InvalidInputError("days must be positive")
        end = datetime.now(UTC)
        return self.repository.list_meals(user_id, end - timedelta(days=days), end)

    def _build_item(self, entry: MealEntry) -> MealFoodItem:
        if entry.quantity <= 0:
            raise InvalidInputError(f"quantity for food {entry.food_id} must be positive")
        food = self.foods.get_food(entry.food_id)
        if food is None:
            raise NotFoundError(f"food {entry.food_id} not found")
        macros = _food_macros(food).scaled(_portion_factor(food, entry))
        return MealFoodItem(
            food_id=food.id,
            food_name=food.name,
            quantity=entry.quantity,
            unit=entry.unit,
            calories=macros.calories,
            protein=macros.protein,
            carbohydrates=macros.carbohydrates,
            fat=macros.fat,
        )


def _portion_factor(food: Food, entry: MealEntry) -> float:
    """Number of base portions in the entry."""
    same_unit = entry.unit.strip().lower() == food.serving_unit.strip().lower()
    if same_unit and food.serving_size > 0:
        return entry.quantity / food.serving_size
    return entry.quantity


def _food_macros(food: Food) -> MacroProfile:
    return MacroProfile(
        calories=food.calories,
        protein=food.protein,
        carbohydrates=food.carbohydrates,
        fat=food.fat,
    )
