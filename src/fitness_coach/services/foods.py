"""Food catalog lookup and AI-backed resolution of unknown foods."""

import json
import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from pydantic import ValidationError

from fitness_coach.domain.completions import ChatMessage
from fitness_coach.domain.errors import FitnessCoachError, ResolutionError
from fitness_coach.domain.extraction import NutritionEstimate
from fitness_coach.domain.foods import AI_GENERATED_SOURCE, Food
from fitness_coach.domain.meals import ExtractedFoodItem, ParsedFoodItem
from fitness_coach.services.completions import CompletionGateway
from fitness_coach.services.llm_json import strip_code_fences

_logger = logging.getLogger(__name__)

AI_CONFIDENCE_PENALTY = 0.8
CATALOG_SEARCH_LIMIT = 5
GENERATED_SERVING_SIZE = 100.0
GENERATED_SERVING_UNIT = "g"

NUTRITION_ESTIMATE_PROMPT = """You are a nutrition expert. Estimate the nutrition information per 100g for the given food.
Return a JSON object with:
{
  "calories": numeric_value,
  "protein": numeric_value_in_grams,
  "carbs": numeric_value_in_grams,
  "fat": numeric_value_in_grams,
  "fiber": numeric_value_in_grams
}

Provide realistic estimates based on typical nutrition values for this type of food."""


class FoodRepository(Protocol):
    """Interface for the food catalog."""

    def search_by_name(self, query: str, limit: int) -> list[Food]:
        """Return foods whose name matches the query, best first."""

    def create_food(self, food: Food) -> UUID:
        """Persist a food and return its id."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Fetch a food by id."""


@dataclass
class FoodResolver:
    """Resolves extracted items to catalog foods, estimating unknown ones."""

    repository: FoodRepository
    completions: CompletionGateway
    model: str | None = None

    async def resolve(self, user_id: UUID, item: ExtractedFoodItem) -> ParsedFoodItem:
        """Match ``item`` in the catalog or create an AI-estimated food.

        Raises ResolutionError when the item cannot be resolved.
        """
        match = self._search(item.name)
        if match is not None:
            return ParsedFoodItem(
                food_id=match.id,
                food_name=match.name,
                quantity=item.quantity,
                unit=item.unit,
                confidence=item.confidence,
                ai_generated=False,
            )

        food = await self._create_estimated_food(item.name)
        _logger.info(
            "Created AI-estimated food %s for user %s: %s", food.id, user_id, food.name
        )
        return ParsedFoodItem(
            food_id=food.id,
            food_name=food.name,
            quantity=item.quantity,
            unit=item.unit,
            confidence=item.confidence * AI_CONFIDENCE_PENALTY,
            ai_generated=True,
        )

    def _search(self, name: str) -> Food | None:
        try:
            results = self.repository.search_by_name(name, CATALOG_SEARCH_LIMIT)
        except Exception as exc:
            _logger.warning("Food search failed for %r, treating as miss: %s", name, exc)
            return None
        return results[0] if results else None

    async def _create_estimated_food(self, name: str) -> Food:
        estimate = await self._estimate_nutrition(name)
        fiber = estimate.fiber
        if fiber is not None and fiber > estimate.carbs:
            fiber = estimate.carbs
        food = Food(
            id=uuid4(),
            name=name,
            serving_size=GENERATED_SERVING_SIZE,
            serving_unit=GENERATED_SERVING_UNIT,
            calories=estimate.calories,
            protein=estimate.protein,
            carbohydrates=estimate.carbs,
            fat=estimate.fat,
            fiber=fiber,
            is_verified=False,
            source=AI_GENERATED_SOURCE,
            created_at=datetime.now(UTC),
        )
        try:
            food_id = self.repository.create_food(food)
        except Exception as exc:
            raise ResolutionError(f"failed to save AI food {name!r}: {exc}") from exc
        return food if food_id == food.id else replace(food, id=food_id)

    async def _estimate_nutrition(self, name: str) -> NutritionEstimate:
        messages = [
            ChatMessage.system(NUTRITION_ESTIMATE_PROMPT),
            ChatMessage.user(f"Food: {name}"),
        ]
        try:
            result = await self.completions.complete(messages, model=self.model)
        except FitnessCoachError as exc:
            raise ResolutionError(f"failed to estimate nutrition for {name!r}: {exc}") from exc
        try:
            return NutritionEstimate.model_validate(
                json.loads(strip_code_fences(result.content))
            )
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ResolutionError(
                f"failed to parse nutrition estimate for {name!r}: {exc}"
            ) from exc
