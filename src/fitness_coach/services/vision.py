"""Vision extraction of food items from meal photos."""

import json
import logging
import re
from dataclasses import dataclass

from pydantic import ValidationError

from fitness_coach.domain.completions import ChatMessage
from fitness_coach.domain.errors import ParseError
from fitness_coach.domain.vision import VisionExtract, VisionItem
from fitness_coach.services.completions import CompletionGateway
from fitness_coach.services.llm_json import extract_json_array

_logger = logging.getLogger(__name__)

VISION_PROMPT = """Analyze this food image and identify all food items visible. For each item, provide:
1. Name of the food item
2. Estimated quantity/portion size
3. Unit of measurement (e.g., cup, piece, gram, oz)
4. Brief description

Format your response as a JSON array of food items like this:
[
  {
    "name": "Grilled Chicken Breast",
    "quantity": 6,
    "unit": "oz",
    "description": "Grilled boneless chicken breast"
  },
  {
    "name": "Steamed Broccoli",
    "quantity": 1,
    "unit": "cup",
    "description": "Fresh steamed broccoli florets"
  }
]

Be specific about the food items and realistic about portion sizes. Only include items you can clearly identify."""

_UNIT_ALIASES = {
    "cup": "cup",
    "cups": "cup",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "piece": "piece",
    "pieces": "piece",
    "tbsp": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "serving": "serving",
    "servings": "serving",
}

_QUANTITY_PATTERN = re.compile(
    r"(\d+\.?\d*)\s*"
    r"(cups|cup|ounces|ounce|oz|grams|gram|g|pieces|piece|tbsp|tsp|servings|serving)\b"
)
_BULLETS = ("-", "*", "•")


@dataclass
class VisionGateway:
    """Sends meal photos to a vision-capable model and parses the reply."""

    completions: CompletionGateway
    model: str

    async def analyze_photo(self, image_url: str) -> VisionExtract:
        """Identify food items in the photo at ``image_url``."""
        message = ChatMessage.user(
            [
                {"type": "image_url", "image_url": {"url": image_url}},
                {"type": "text", "text": VISION_PROMPT},
            ]
        )
        result = await self.completions.complete([message], model=self.model)
        extract = parse_vision_reply(result.content)
        _logger.info("Vision detected %s food items", len(extract.items))
        return extract


def parse_vision_reply(content: str) -> VisionExtract:
    """Parse a vision reply, falling back to line heuristics.

    Raises ParseError when neither strategy yields a usable item.
    """
    items = _decode_items(content)
    if items is None:
        _logger.warning("Vision reply had no decodable JSON array; parsing lines")
        items = parse_manually(content)

    valid = [
        item.model_copy(update={"name": item.name.strip(), "unit": normalize_unit(item.unit)})
        for item in items
        if item.name.strip() and item.quantity > 0
    ]
    if not valid:
        raise ParseError("no food items found in vision response")
    return VisionExtract(items=valid)


def parse_manually(content: str) -> list[VisionItem]:
    """Parse free-form lines such as ``- Rice 1 cup`` into items."""
    items = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        for bullet in _BULLETS:
            line = line.removeprefix(bullet)
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        item = _parse_line(line)
        if item is not None:
            items.append(item)
    return items


def normalize_unit(unit: str) -> str:
    """Map unit spellings onto canonical names; unknown units pass through."""
    cleaned = unit.strip().lower()
    return _UNIT_ALIASES.get(cleaned, cleaned)


def _decode_items(content: str) -> list[VisionItem] | None:
    array_text = extract_json_array(content)
    if array_text is None:
        return None
    try:
        raw_items = json.loads(array_text)
    except json.JSONDecodeError as exc:
        _logger.warning("Vision JSON decode failed: %s", exc)
        return None

    items = []
    for raw in raw_items:
        try:
            items.append(VisionItem.model_validate(raw))
        except ValidationError as exc:
            _logger.warning("Skipping malformed vision item %r: %s", raw, exc)
    return items


def _parse_line(line: str) -> VisionItem | None:
    match = _QUANTITY_PATTERN.search(line.lower())
    if match is None:
        if line.endswith(":"):
            return None
        return VisionItem(name=line, quantity=1.0, unit="serving")
    name = line[: match.start()].strip().rstrip(":,-").strip()
    return VisionItem(name=name, quantity=float(match.group(1)), unit=match.group(2))
