"""Supabase repository for the food catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_coach.domain.foods import Food
from fitness_coach.services.foods import FoodRepository


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed food catalog."""

    client: Client

    def search_by_name(self, query: str, limit: int) -> list[Food]:
        """Search foods by name, verified entries first."""
        response = (
            self.client.table("foods")
            .select("*")
            .ilike("name", f"%{query}%")
            .order("is_verified", desc=True)
            .order("name")
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def create_food(self, food: Food) -> UUID:
        """Insert a food row and return its id."""
        response = (
            self.client.table("foods")
            .insert(
                {
                    "id": str(food.id),
                    "fdc_id": food.fdc_id,
                    "name": food.name,
                    "brand": food.brand,
                    "serving_size": food.serving_size,
                    "serving_unit": food.serving_unit,
                    "calories": food.calories,
                    "protein": food.protein,
                    "carbohydrates": food.carbohydrates,
                    "fat": food.fat,
                    "fiber": food.fiber,
                    "sugar": food.sugar,
                    "sodium": food.sodium,
                    "is_verified": food.is_verified,
                    "source": food.source,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food")
        return UUID(response.data[0]["id"])

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])


def _parse_food(row: dict[str, object]) -> Food:
    """Parse a foods row into a domain model."""
    created_raw = row.get("created_at")
    return Food(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        serving_size=float(row.get("serving_size") or 0.0),
        serving_unit=str(row.get("serving_unit") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbohydrates=float(row.get("carbohydrates") or 0.0),
        fat=float(row.get("fat") or 0.0),
        fiber=_optional_float(row.get("fiber")),
        sugar=_optional_float(row.get("sugar")),
        sodium=_optional_float(row.get("sodium")),
        is_verified=bool(row.get("is_verified", False)),
        source=row.get("source"),
        brand=row.get("brand"),
        fdc_id=row.get("fdc_id"),
        created_at=datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None,
    )


def _optional_float(value: object) -> float | None:
    return float(value) if isinstance(value, int | float) else None
