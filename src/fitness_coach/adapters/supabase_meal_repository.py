"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_coach.domain.meals import Meal, MealFoodItem, MealType
from fitness_coach.services.meals import MealRepository

_MEAL_SELECT = "*, meal_food_items(*, foods(name))"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals and their food items."""

    client: Client

    def create_meal(self, meal: Meal) -> UUID:
        """Create a meal row with its food items and return its id."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "id": str(meal.id),
                    "user_id": str(meal.user_id),
                    "name": meal.name,
                    "meal_type": meal.meal_type.value,
                    "consumed_at": meal.consumed_at.isoformat(),
                    "notes": meal.notes,
                    "total_calories": meal.total_calories,
                    "total_protein": meal.total_protein,
                    "total_carbohydrates": meal.total_carbohydrates,
                    "total_fat": meal.total_fat,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        meal_id = UUID(response.data[0]["id"])
        payload = [
            {
                "meal_id": str(meal_id),
                "food_id": str(item.food_id),
                "quantity": item.quantity,
                "unit": item.unit,
                "calories": item.calories,
                "protein": item.protein,
                "carbohydrates": item.carbohydrates,
                "fat": item.fat,
            }
            for item in meal.items
        ]
        if payload:
            self.client.table("meal_food_items").insert(payload).execute()
        return meal_id

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals consumed within a time range, newest first."""
        response = (
            self.client.table("meals")
            .select(_MEAL_SELECT)
            .eq("user_id", str(user_id))
            .gte("consumed_at", start.isoformat())
            .lt("consumed_at", end.isoformat())
            .order("consumed_at", desc=True)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]


def _parse_meal(row: dict[str, object]) -> Meal:
    """Parse a meals row with nested items into a domain model."""
    meal_type = MealType.parse(row.get("meal_type")) or MealType.SNACK
    return Meal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        meal_type=meal_type,
        consumed_at=datetime.fromisoformat(str(row["consumed_at"])),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbohydrates=float(row.get("total_carbohydrates") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        items=[_parse_item(item) for item in row.get("meal_food_items") or []],
        notes=row.get("notes"),
    )


def _parse_item(row: dict[str, object]) -> MealFoodItem:
    food = row.get("foods")
    food_name = food.get("name", "") if isinstance(food, dict) else ""
    return MealFoodItem(
        food_id=UUID(str(row["food_id"])),
        food_name=str(food_name),
        quantity=float(row.get("quantity") or 0.0),
        unit=str(row.get("unit") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbohydrates=float(row.get("carbohydrates") or 0.0),
        fat=float(row.get("fat") or 0.0),
    )
