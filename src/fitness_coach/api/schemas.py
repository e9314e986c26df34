"""Request models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from fitness_coach.domain.meals import (
    MealAdjustments,
    MealType,
    ParsedFoodItem,
    ParsedMeal,
)


class ParseMealRequest(BaseModel):
    description: str = Field(min_length=1)
    meal_type: MealType | None = None


class ParsePhotoRequest(BaseModel):
    photo_url: str = Field(min_length=1)


class ParsedFoodItemPayload(BaseModel):
    food_id: UUID | None = None
    food_name: str
    quantity: float = Field(gt=0)
    unit: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    ai_generated: bool = False

    def to_domain(self) -> ParsedFoodItem:
        return ParsedFoodItem(
            food_id=self.food_id,
            food_name=self.food_name,
            quantity=self.quantity,
            unit=self.unit,
            confidence=self.confidence,
            ai_generated=self.ai_generated,
        )


class ParsedMealPayload(BaseModel):
    meal_type: MealType
    logged_at: datetime
    items: list[ParsedFoodItemPayload]
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    needs_confirmation: bool = False

    def to_domain(self) -> ParsedMeal:
        return ParsedMeal(
            meal_type=self.meal_type,
            logged_at=self.logged_at,
            items=[item.to_domain() for item in self.items],
            confidence=self.confidence,
            needs_confirmation=self.needs_confirmation,
        )


class MealAdjustmentsPayload(BaseModel):
    meal_type: MealType | None = None
    name: str | None = None
    notes: str | None = None
    consumed_at: datetime | None = None
    items: list[ParsedFoodItemPayload] | None = None

    def to_domain(self) -> MealAdjustments:
        return MealAdjustments(
            meal_type=self.meal_type,
            name=self.name,
            notes=self.notes,
            consumed_at=self.consumed_at,
            items=None if self.items is None else [item.to_domain() for item in self.items],
        )


class ConfirmMealRequest(BaseModel):
    parsed_meal: ParsedMealPayload
    adjustments: MealAdjustmentsPayload | None = None


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
