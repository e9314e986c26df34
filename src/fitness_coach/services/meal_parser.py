"""Text and photo meal parsing into resolved, confidence-scored meals."""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from pydantic import ValidationError

from fitness_coach.domain.completions import ChatMessage
from fitness_coach.domain.errors import (
    InvalidInputError,
    NoFoodItemsError,
    ParseError,
    ResolutionError,
)
from fitness_coach.domain.extraction import TextMealExtract, TextMealItem
from fitness_coach.domain.meals import (
    ExtractedFoodItem,
    MealType,
    ParsedFoodItem,
    ParsedMeal,
)
from fitness_coach.services.completions import CompletionGateway
from fitness_coach.services.foods import FoodResolver
from fitness_coach.services.llm_json import strip_code_fences
from fitness_coach.services.vision import VisionGateway

_logger = logging.getLogger(__name__)

TEXT_CONFIRMATION_THRESHOLD = 0.8
PHOTO_CONFIRMATION_THRESHOLD = 0.7
DEFAULT_VISION_CONFIDENCE = 0.7

TEXT_EXTRACTION_PROMPT = """You are a nutrition expert. Extract food items, quantities, and meal type from the user's text.
Return a JSON object with:
{
  "meal_type": "breakfast|lunch|dinner|snack",
  "items": [
    {
      "name": "food name",
      "quantity": numeric_amount,
      "unit": "g|ml|cup|piece|tbsp|tsp",
      "confidence": 0.0-1.0
    }
  ]
}

If meal type cannot be determined, infer from context or time of day. Use standard units (prefer grams for solids, ml for liquids)."""


def infer_meal_type(moment: datetime) -> MealType:
    """Return the meal slot for the wall-clock hour of ``moment``.

    Callers pass the server's local time.
    """
    hour = moment.hour
    if 5 <= hour < 11:
        return MealType.BREAKFAST
    if 11 <= hour < 15:
        return MealType.LUNCH
    if 15 <= hour < 18:
        return MealType.SNACK
    return MealType.DINNER


@dataclass
class MealParserService:
    """Turns meal descriptions and photos into parsed meals."""

    completions: CompletionGateway
    vision: VisionGateway
    resolver: FoodResolver
    model: str | None = None

    async def parse_text(
        self, user_id: UUID, text: str, meal_type_hint: MealType | None = None
    ) -> ParsedMeal:
        """Parse a free-text meal description."""
        if not text.strip():
            raise InvalidInputError("meal description must not be empty")

        messages = [ChatMessage.system(TEXT_EXTRACTION_PROMPT), ChatMessage.user(text)]
        result = await self.completions.complete(messages, model=self.model)
        try:
            extract = TextMealExtract.model_validate(
                json.loads(strip_code_fences(result.content))
            )
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ParseError(f"failed to parse meal extraction: {exc}") from exc

        extracted = [
            ExtractedFoodItem(
                name=item.name.strip(),
                quantity=item.quantity,
                unit=item.unit,
                confidence=item.confidence,
            )
            for item in _valid_text_items(extract.items)
        ]
        items = await self._resolve_all(user_id, extracted)
        if not items:
            raise NoFoodItemsError("no valid food items could be extracted")

        logged_at = datetime.now(UTC)
        meal_type = (
            meal_type_hint
            or MealType.parse(extract.meal_type)
            or infer_meal_type(logged_at.astimezone())
        )
        return _build_parsed_meal(meal_type, logged_at, items, TEXT_CONFIRMATION_THRESHOLD)

    async def parse_photo(self, user_id: UUID, photo_url: str) -> ParsedMeal:
        """Parse a meal photo available at ``photo_url``."""
        if not photo_url.strip():
            raise InvalidInputError("photo url must not be empty")

        extract = await self.vision.analyze_photo(photo_url)
        extracted = [
            ExtractedFoodItem(
                name=item.name,
                quantity=item.quantity,
                unit=item.unit,
                confidence=item.confidence or DEFAULT_VISION_CONFIDENCE,
            )
            for item in extract.items
        ]
        items = await self._resolve_all(user_id, extracted)
        if not items:
            raise NoFoodItemsError("no valid food items could be extracted from image")

        logged_at = datetime.now(UTC)
        return _build_parsed_meal(
            infer_meal_type(logged_at.astimezone()),
            logged_at,
            items,
            PHOTO_CONFIRMATION_THRESHOLD,
        )

    async def _resolve_all(
        self, user_id: UUID, extracted: Iterable[ExtractedFoodItem]
    ) -> list[ParsedFoodItem]:
        items = []
        for item in extracted:
            if not item.name or item.quantity <= 0:
                _logger.warning("Skipping invalid extracted item: %r", item)
                continue
            try:
                items.append(await self.resolver.resolve(user_id, item))
            except ResolutionError as exc:
                _logger.warning("Skipping unresolved food %r: %s", item.name, exc)
        return items


def _build_parsed_meal(
    meal_type: MealType,
    logged_at: datetime,
    items: list[ParsedFoodItem],
    threshold: float,
) -> ParsedMeal:
    confidence = sum(item.confidence for item in items) / len(items)
    return ParsedMeal(
        meal_type=meal_type,
        logged_at=logged_at,
        items=items,
        confidence=confidence,
        needs_confirmation=confidence < threshold,
    )


def _valid_text_items(raw_items: Iterable[object]) -> list[TextMealItem]:
    items = []
    for raw in raw_items:
        try:
            items.append(TextMealItem.model_validate(raw))
        except ValidationError as exc:
            _logger.warning("Skipping malformed extracted item %r: %s", raw, exc)
    return items
