"""Read and write access to a user's tracked fitness data."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from fitness_coach.domain.errors import InvalidInputError, NotFoundError
from fitness_coach.domain.tracking import (
    Activity,
    DailySummary,
    Goal,
    Metric,
    UserProfile,
    Workout,
)
from fitness_coach.services.meals import MealRepository


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_user(self, user_id: UUID) -> UserProfile | None:
        """Return a user profile by id."""


class GoalRepository(Protocol):
    """Persistence interface for goals."""

    def list_goals(self, user_id: UUID, status: str) -> list[Goal]:
        """Return the user's goals with the given status."""


class ActivityRepository(Protocol):
    """Persistence interface for activities and workouts."""

    def list_activities(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[Activity]:
        """Return activities started in ``[start, end)``, newest first."""

    def list_workouts(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[Workout]:
        """Return workouts started in ``[start, end)``, newest first."""


class MetricRepository(Protocol):
    """Persistence interface for body metrics."""

    def create_metric(self, user_id: UUID, metric: Metric) -> UUID:
        """Persist a metric and return its id."""

    def list_metrics(
        self, user_id: UUID, metric_type: str, start: datetime, end: datetime
    ) -> list[Metric]:
        """Return metrics of one type recorded in ``[start, end)``."""


@dataclass
class TrackingService:
    """Service for goals, activity history, daily totals and body metrics."""

    users: UserRepository
    goals: GoalRepository
    activities: ActivityRepository
    metrics: MetricRepository
    meals: MealRepository

    def get_profile(self, user_id: UUID) -> UserProfile:
        user = self.users.get_user(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    def get_goals(self, user_id: UUID, status: str = "active") -> list[Goal]:
        return self.goals.list_goals(user_id, status)

    def get_daily_summary(self, user_id: UUID, day: date | None = None) -> DailySummary:
        """Sum the meals consumed on ``day`` (UTC, defaults to today)."""
        day = day or datetime.now(UTC).date()
        start = datetime.combine(day, time.min, tzinfo=UTC)
        meals = self.meals.list_meals(user_id, start, start + timedelta(days=1))
        return DailySummary(
            day=day,
            total_calories=sum(meal.total_calories for meal in meals),
            total_protein=sum(meal.total_protein for meal in meals),
            total_carbohydrates=sum(meal.total_carbohydrates for meal in meals),
            total_fat=sum(meal.total_fat for meal in meals),
            meal_count=len(meals),
        )

    def get_activities(self, user_id: UUID, days: int) -> list[Activity]:
        start, end = _window(days)
        return self.activities.list_activities(user_id, start, end)

    def get_workouts(self, user_id: UUID, days: int) -> list[Workout]:
        start, end = _window(days)
        return self.activities.list_workouts(user_id, start, end)

    def log_metric(
        self,
        user_id: UUID,
        metric_type: str,
        value: float,
        unit: str,
        recorded_at: datetime | None = None,
    ) -> Metric:
        """Record a body metric; ``value`` must be positive."""
        if value <= 0:
            raise InvalidInputError(f"{metric_type} value must be positive")
        metric = Metric(
            id=uuid4(),
            metric_type=metric_type,
            value=value,
            unit=unit,
            recorded_at=recorded_at or datetime.now(UTC),
        )
        metric_id = self.metrics.create_metric(user_id, metric)
        return metric if metric_id == metric.id else replace(metric, id=metric_id)

    def get_metric_trend(
        self, user_id: UUID, metric_type: str, days: int
    ) -> list[Metric]:
        """Return metrics from the last ``days`` days, oldest first."""
        start, end = _window(days)
        metrics = self.metrics.list_metrics(user_id, metric_type, start, end)
        return sorted(metrics, key=lambda metric: metric.recorded_at)


def _window(days: int) -> tuple[datetime, datetime]:
    if days <= 0:
        raise InvalidInputError("days must be positive")
    end = datetime.now(UTC)
    return end - timedelta(days=days), end
