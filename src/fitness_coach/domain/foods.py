"""Food catalog domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

AI_GENERATED_SOURCE = "ai_generated"


@dataclass(frozen=True)
class Food:
    """Catalog entry with macros for one base portion."""

    id: UUID
    name: str
    serving_size: float
    serving_unit: str
    calories: float
    protein: float
    carbohydrates: float
    fat: float
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    is_verified: bool = False
    source: str | None = None
    brand: str | None = None
    fdc_id: int | None = None
    created_at: datetime | None = None
