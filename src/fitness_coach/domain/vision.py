"""Models for vision extraction results."""

from pydantic import BaseModel, Field, field_validator

from fitness_coach.domain.extraction import clamp_confidence


class VisionItem(BaseModel):
    """Single detected food item from vision."""

    name: str = ""
    quantity: float = 0.0
    unit: str = ""
    description: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence_range(cls, value: object) -> object:
        return clamp_confidence(value)


class VisionExtract(BaseModel):
    """Structured output for vision extraction."""

    items: list[VisionItem]
