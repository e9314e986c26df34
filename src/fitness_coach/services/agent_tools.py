"""Function-calling tools exposed to the coaching agent."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError

from fitness_coach.domain.completions import ToolDefinition
from fitness_coach.domain.errors import InvalidInputError
from fitness_coach.domain.meals import MealEntry, MealType
from fitness_coach.domain.nutrition import DAILY_TARGETS
from fitness_coach.services.foods import FoodRepository
from fitness_coach.services.meals import MealService
from fitness_coach.services.tracking import TrackingService

_logger = logging.getLogger(__name__)

FOOD_SEARCH_LIMIT = 10
WEIGHT_METRIC = "weight"
WEIGHT_UNIT = "kg"

_DAYS_SCHEMA = {
    "type": "integer",
    "description": "Number of days to look back",
}


class LogMealItemArgs(BaseModel):
    food_id: UUID
    quantity: float = Field(gt=0)
    unit: str = "serving"


class LogMealArgs(BaseModel):
    food_items: list[LogMealItemArgs] = Field(min_length=1)
    meal_type: MealType
    timestamp: datetime | None = None


class DaysArgs(BaseModel):
    days: int = Field(default=7, gt=0)


class WeightTrendArgs(BaseModel):
    days: int = Field(default=30, gt=0)


class SearchFoodsArgs(BaseModel):
    query: str = Field(min_length=1)


class DailyMacrosArgs(BaseModel):
    day: date = Field(alias="date")


class LogWeightArgs(BaseModel):
    weight: float = Field(gt=0)
    day: date | None = Field(default=None, alias="date")


@dataclass(frozen=True)
class ToolSpec:
    """Tool schema paired with its argument model and handler."""

    definition: ToolDefinition
    args_model: type[BaseModel]
    handler: Callable[["AgentToolbox", UUID, BaseModel], str]


@dataclass
class AgentToolbox:
    """Executes agent tool calls against the fitness services."""

    meals: MealService
    tracking: TrackingService
    foods: FoodRepository

    @property
    def definitions(self) -> list[ToolDefinition]:
        return [spec.definition for spec in TOOL_SPECS.values()]

    def execute(self, name: str, arguments: str, user_id: UUID) -> str:
        """Run one tool call and return its textual result.

        Raises InvalidInputError for unknown tools or malformed arguments;
        service errors propagate unchanged.
        """
        spec = TOOL_SPECS.get(name)
        if spec is None:
            raise InvalidInputError(f"unknown tool: {name}")
        try:
            raw = json.loads(arguments or "{}")
            args = spec.args_model.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise InvalidInputError(f"invalid arguments for {name}: {exc}") from exc
        _logger.info("Executing tool %s for user %s", name, user_id)
        return spec.handler(self, user_id, args)


def _log_meal(toolbox: AgentToolbox, user_id: UUID, args: LogMealArgs) -> str:
    meal = toolbox.meals.log_meal(
        user_id,
        args.meal_type,
        [
            MealEntry(food_id=item.food_id, quantity=item.quantity, unit=item.unit)
            for item in args.food_items
        ],
        consumed_at=args.timestamp,
    )
    return (
        f"Logged {meal.meal_type.value} with {len(meal.items)} items: "
        f"{meal.total_calories:.0f} cal, {meal.total_protein:.1f}g protein, "
        f"{meal.total_carbohydrates:.1f}g carbs, {meal.total_fat:.1f}g fat"
    )


def _get_recent_meals(toolbox: AgentToolbox, user_id: UUID, args: DaysArgs) -> str:
    meals = toolbox.meals.list_recent_meals(user_id, args.days)
    lines = [f"Found {len(meals)} meals in the last {args.days} days:"]
    for meal in meals:
        lines.append(
            f"- {meal.name} ({meal.meal_type.value}) on "
            f"{meal.consumed_at:%Y-%m-%d}: {meal.total_calories:.0f} cal, "
            f"{meal.total_protein:.1f}g protein"
        )
    return "\n".join(lines)


def _search_foods(toolbox: AgentToolbox, user_id: UUID, args: SearchFoodsArgs) -> str:
    foods = toolbox.foods.search_by_name(args.query, FOOD_SEARCH_LIMIT)
    lines = [f"Found {len(foods)} foods matching '{args.query}':"]
    for food in foods:
        lines.append(
            f"- {food.name} [id: {food.id}] ({food.calories:.0f} cal, "
            f"{food.protein:.1f}g protein, {food.carbohydrates:.1f}g carbs, "
            f"{food.fat:.1f}g fat per {food.serving_size:g} {food.serving_unit})"
        )
    return "\n".join(lines)


def _calculate_daily_macros(
    toolbox: AgentToolbox, user_id: UUID, args: DailyMacrosArgs
) -> str:
    summary = toolbox.tracking.get_daily_summary(user_id, args.day)
    return "\n".join(
        [
            f"Daily macros for {args.day.isoformat()}:",
            f"- Calories: {summary.total_calories:.0f} / {DAILY_TARGETS.calories:.0f}",
            f"- Protein: {summary.total_protein:.1f}g / {DAILY_TARGETS.protein:.1f}g",
            f"- Carbs: {summary.total_carbohydrates:.1f}g / "
            f"{DAILY_TARGETS.carbohydrates:.1f}g",
            f"- Fat: {summary.total_fat:.1f}g / {DAILY_TARGETS.fat:.1f}g",
        ]
    )


def _get_recent_workouts(toolbox: AgentToolbox, user_id: UUID, args: DaysArgs) -> str:
    workouts = toolbox.tracking.get_workouts(user_id, args.days)
    lines = [f"Found {len(workouts)} workouts in the last {args.days} days:"]
    for workout in workouts:
        duration = (
            f" ({workout.duration_minutes} min)" if workout.duration_minutes else ""
        )
        lines.append(f"- {workout.name} on {workout.start_time:%Y-%m-%d}{duration}")
    return "\n".join(lines)


def _get_recent_activities(
    toolbox: AgentToolbox, user_id: UUID, args: DaysArgs
) -> str:
    activities = toolbox.tracking.get_activities(user_id, args.days)
    lines = [f"Found {len(activities)} activities in the last {args.days} days:"]
    for activity in activities:
        duration = (
            f" ({activity.duration_minutes} min)" if activity.duration_minutes else ""
        )
        calories = (
            f", {activity.calories_burned:.0f} cal"
            if activity.calories_burned is not None
            else ""
        )
        lines.append(
            f"- {activity.activity_type} on {activity.start_time:%Y-%m-%d}"
            f"{duration}{calories}"
        )
    return "\n".join(lines)


def _log_weight(toolbox: AgentToolbox, user_id: UUID, args: LogWeightArgs) -> str:
    recorded_at = (
        datetime.combine(args.day, time.min, tzinfo=UTC) if args.day else None
    )
    metric = toolbox.tracking.log_metric(
        user_id, WEIGHT_METRIC, args.weight, WEIGHT_UNIT, recorded_at
    )
    return f"Logged weight: {metric.value:.1f} kg on {metric.recorded_at:%Y-%m-%d}"


def _get_weight_trend(
    toolbox: AgentToolbox, user_id: UUID, args: WeightTrendArgs
) -> str:
    metrics = toolbox.tracking.get_metric_trend(user_id, WEIGHT_METRIC, args.days)
    if not metrics:
        return f"No weight data found for the last {args.days} days"
    lines = [
        f"Weight trend (last {args.days} days, {len(metrics)} measurements):",
        *(f"- {m.recorded_at:%Y-%m-%d}: {m.value:.1f} kg" for m in metrics),
    ]
    if len(metrics) >= 2:
        lines.append(f"\nChange: {metrics[-1].value - metrics[0].value:.1f} kg")
    return "\n".join(lines)


def _days_parameters(default: int) -> dict[str, object]:
    return {
        "type": "object",
        "properties": {"days": {**_DAYS_SCHEMA, "default": default}},
    }


TOOL_SPECS: dict[str, ToolSpec] = {
    spec.definition.name: spec
    for spec in (
        ToolSpec(
            ToolDefinition(
                name="log_meal",
                description="Log a meal with food items",
                parameters={
                    "type": "object",
                    "properties": {
                        "food_items": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "food_id": {"type": "string"},
                                    "quantity": {"type": "number"},
                                    "unit": {"type": "string"},
                                },
                            },
                        },
                        "meal_type": {
                            "type": "string",
                            "enum": [meal_type.value for meal_type in MealType],
                        },
                        "timestamp": {"type": "string"},
                    },
                    "required": ["food_items", "meal_type"],
                },
            ),
            LogMealArgs,
            _log_meal,
        ),
        ToolSpec(
            ToolDefinition(
                name="get_recent_meals",
                description="Get user's recent meals",
                parameters=_days_parameters(7),
            ),
            DaysArgs,
            _get_recent_meals,
        ),
        ToolSpec(
            ToolDefinition(
                name="search_foods",
                description="Search for foods in the database",
                parameters={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Search query for food name",
                        }
                    },
                    "required": ["query"],
                },
            ),
            SearchFoodsArgs,
            _search_foods,
        ),
        ToolSpec(
            ToolDefinition(
                name="calculate_daily_macros",
                description="Calculate daily macro totals for a specific date",
                parameters={
                    "type": "object",
                    "properties": {
                        "date": {
                            "type": "string",
                            "description": "Date in YYYY-MM-DD format",
                        }
                    },
                    "required": ["date"],
                },
            ),
            DailyMacrosArgs,
            _calculate_daily_macros,
        ),
        ToolSpec(
            ToolDefinition(
                name="get_recent_workouts",
                description="Get user's recent workouts",
                parameters=_days_parameters(7),
            ),
            DaysArgs,
            _get_recent_workouts,
        ),
        ToolSpec(
            ToolDefinition(
                name="get_recent_activities",
                description="Get user's recent activities",
                parameters=_days_parameters(7),
            ),
            DaysArgs,
            _get_recent_activities,
        ),
        ToolSpec(
            ToolDefinition(
                name="log_weight",
                description="Log a weight measurement",
                parameters={
                    "type": "object",
                    "properties": {
                        "weight": {"type": "number", "description": "Weight in kg"},
                        "date": {
                            "type": "string",
                            "description": "Date in YYYY-MM-DD format",
                        },
                    },
                    "required": ["weight"],
                },
            ),
            LogWeightArgs,
            _log_weight,
        ),
        ToolSpec(
            ToolDefinition(
                name="get_weight_trend",
                description="Get weight trend data",
                parameters=_days_parameters(30),
            ),
            WeightTrendArgs,
            _get_weight_trend,
        ),
    )
}
