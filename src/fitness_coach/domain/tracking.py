"""Domain models for tracked fitness data."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class UserProfile:
    """Display information about a user."""

    id: UUID
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Goal:
    """Fitness or health goal."""

    id: UUID
    goal_type: str
    description: str
    target_value: float
    unit: str
    status: str = "active"


@dataclass(frozen=True)
class Activity:
    """Logged activity such as a run or a walk."""

    id: UUID
    activity_type: str
    start_time: datetime
    duration_minutes: int | None = None
    calories_burned: float | None = None


@dataclass(frozen=True)
class Workout:
    """Logged strength or conditioning workout."""

    id: UUID
    name: str
    start_time: datetime
    duration_minutes: int | None = None


@dataclass(frozen=True)
class Metric:
    """Body metric measurement."""

    id: UUID
    metric_type: str
    value: float
    unit: str
    recorded_at: datetime


@dataclass(frozen=True)
class DailySummary:
    """Nutrition totals for one day."""

    day: date
    total_calories: float
    total_protein: float
    total_carbohydrates: float
    total_fat: float
    meal_count: int
