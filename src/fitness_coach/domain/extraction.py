"""Models for structured data decoded from model replies."""

from pydantic import BaseModel, Field, field_validator


def clamp_confidence(value: object) -> object:
    """Clamp numeric confidences into ``[0, 1]``; other values pass through."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        return min(max(float(value), 0.0), 1.0)
    return value


class TextMealItem(BaseModel):
    """Single food item extracted from a meal description."""

    name: str
    quantity: float = 1.0
    unit: str = "serving"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence_range(cls, value: object) -> object:
        return 0.0 if value is None else clamp_confidence(value)


class TextMealExtract(BaseModel):
    """Envelope of the text meal extraction prompt.

    Items stay raw here and are validated one by one, so a single malformed
    item does not discard the rest of the meal.
    """

    meal_type: object = None
    items: list[object] = Field(default_factory=list)


class NutritionEstimate(BaseModel):
    """Macros per 100 g estimated by the model for an unknown food."""

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    fiber: float | None = Field(default=None, ge=0.0)
