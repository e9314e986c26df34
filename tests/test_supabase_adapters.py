"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from fitness_coach.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from fitness_coach.adapters.supabase_conversation_repository import (
    SupabaseConversationRepository,
)
from fitness_coach.adapters.supabase_food_repository import SupabaseFoodRepository
from fitness_coach.adapters.supabase_goal_repository import SupabaseGoalRepository
from fitness_coach.adapters.supabase_meal_repository import SupabaseMealRepository
from fitness_coach.adapters.supabase_metric_repository import SupabaseMetricRepository
from fitness_coach.adapters.supabase_user_repository import SupabaseUserRepository
from fitness_coach.domain.conversations import Conversation, Message
from fitness_coach.domain.meals import Meal, MealFoodItem, MealType
from fitness_coach.domain.tracking import Metric
from tests.conftest import make_food


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": []}
    )
    payloads: list[object] = field(default_factory=list)
    filters: list[tuple[str, str, object]] = field(default_factory=list)
    ranges: list[tuple[int, int]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.payloads.append(payload)
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.payloads.append(payload)
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("eq", column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("ilike", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.filters.append(("lt", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def range(self, start: int, end: int) -> "FakeTable":
        self.ranges.append((start, end))
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _food_row(food_id: str, name: str) -> dict[str, object]:
    return {
        "id": food_id,
        "name": name,
        "serving_size": 100,
        "serving_unit": "g",
        "calories": 165,
        "protein": 31,
        "carbohydrates": 0,
        "fat": 3.6,
        "fiber": None,
        "is_verified": True,
        "source": "usda",
        "created_at": "2024-05-01T10:00:00+00:00",
    }


def test_supabase_food_repository_search_and_get() -> None:
    client = FakeSupabaseClient()
    foods = client.table("foods")
    food_id = str(uuid4())
    foods.queue("select", [_food_row(food_id, "Chicken breast")])
    foods.queue("select", [])

    repository = SupabaseFoodRepository(client)
    results = repository.search_by_name("chicken", 5)

    assert [food.name for food in results] == ["Chicken breast"]
    assert results[0].id == UUID(food_id)
    assert results[0].fiber is None
    assert results[0].created_at == datetime(2024, 5, 1, 10, tzinfo=UTC)
    assert ("ilike", "name", "%chicken%") in foods.filters
    assert repository.get_food(uuid4()) is None


def test_supabase_food_repository_create() -> None:
    client = FakeSupabaseClient()
    foods = client.table("foods")
    food = make_food("Mystery stew", is_verified=False, source="ai_generated")
    foods.queue("insert", [{"id": str(food.id)}])

    created_id = SupabaseFoodRepository(client).create_food(food)

    assert created_id == food.id
    payload = foods.payloads[0]
    assert payload["source"] == "ai_generated"
    assert payload["is_verified"] is False


def test_supabase_food_repository_create_without_rows_fails() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(RuntimeError, match="Failed to create food"):
        SupabaseFoodRepository(client).create_food(make_food("Ghost"))


def test_supabase_meal_repository_create_and_list() -> None:
    client = FakeSupabaseClient()
    meals = client.table("meals")
    user_id = uuid4()
    food_id = uuid4()
    meal = Meal(
        id=uuid4(),
        user_id=user_id,
        name="Lunch",
        meal_type=MealType.LUNCH,
        consumed_at=datetime(2024, 5, 1, 12, tzinfo=UTC),
        total_calories=330.0,
        total_protein=62.0,
        total_carbohydrates=0.0,
        total_fat=7.2,
        items=[
            MealFoodItem(
                food_id=food_id,
                food_name="Chicken",
                quantity=200,
                unit="g",
                calories=330.0,
                protein=62.0,
                carbohydrates=0.0,
                fat=7.2,
            )
        ],
    )
    meals.queue("insert", [{"id": str(meal.id)}])
    meals.queue(
        "select",
        [
            {
                "id": str(meal.id),
                "user_id": str(user_id),
                "name": "Lunch",
                "meal_type": "lunch",
                "consumed_at": "2024-05-01T12:00:00+00:00",
                "total_calories": 330,
                "total_protein": 62,
                "total_carbohydrates": 0,
                "total_fat": 7.2,
                "notes": None,
                "meal_food_items": [
                    {
                        "food_id": str(food_id),
                        "quantity": 200,
                        "unit": "g",
                        "calories": 330,
                        "protein": 62,
                        "carbohydrates": 0,
                        "fat": 7.2,
                        "foods": {"name": "Chicken"},
                    }
                ],
            }
        ],
    )

    repository = SupabaseMealRepository(client)
    created_id = repository.create_meal(meal)
    start = datetime(2024, 5, 1, tzinfo=UTC)
    listed = repository.list_meals(user_id, start, start + timedelta(days=1))

    assert created_id == meal.id
    item_payload = client.table("meal_food_items").payloads[0]
    assert item_payload == [
        {
            "meal_id": str(meal.id),
            "food_id": str(food_id),
            "quantity": 200,
            "unit": "g",
            "calories": 330.0,
            "protein": 62.0,
            "carbohydrates": 0.0,
            "fat": 7.2,
        }
    ]
    assert listed[0].meal_type is MealType.LUNCH
    assert listed[0].items[0].food_name == "Chicken"
    assert ("gte", "consumed_at", start.isoformat()) in meals.filters


def test_supabase_conversation_repository() -> None:
    client = FakeSupabaseClient()
    conversations = client.table("conversations")
    messages = client.table("messages")
    user_id = uuid4()
    now = datetime(2024, 5, 1, 9, tzinfo=UTC)
    conversation = Conversation(
        id=uuid4(), user_id=user_id, title="New Conversation", created_at=now, updated_at=now
    )
    conversations.queue("insert", [{"id": str(conversation.id)}])
    conversations.queue(
        "select",
        [
            {
                "id": str(conversation.id),
                "user_id": str(user_id),
                "title": "New Conversation",
                "context": None,
                "created_at": now.isoformat(),
                "updated_at": now.isoformat(),
            }
        ],
    )
    rows = [
        {
            "id": str(uuid4()),
            "conversation_id": str(conversation.id),
            "role": role,
            "content": content,
            "metadata": None,
            "created_at": (now + timedelta(minutes=minute)).isoformat(),
        }
        for minute, role, content in [(1, "assistant", "hello"), (0, "user", "hi")]
    ]
    messages.queue("select", rows)

    repository = SupabaseConversationRepository(client)
    created_id = repository.create_conversation(conversation)
    recent = repository.list_recent_by_user(user_id, 1)
    repository.append_message(
        Message(
            id=uuid4(),
            conversation_id=conversation.id,
            role="user",
            content="hi",
            created_at=now,
        )
    )
    latest = repository.get_latest_messages(conversation.id, 20)
    repository.list_messages(conversation.id, 10, 20)

    assert created_id == conversation.id
    assert recent[0].title == "New Conversation"
    assert messages.payloads[0]["content"] == "hi"
    assert "updated_at" in conversations.payloads[-1]
    assert [message.content for message in latest] == ["hi", "hello"]
    assert messages.ranges == [(20, 29)]


def test_supabase_tracking_repositories() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    client.table("users").queue(
        "select", [{"id": str(user_id), "first_name": "Ada", "last_name": "Lovelace"}]
    )
    client.table("goals").queue(
        "select",
        [
            {
                "id": str(uuid4()),
                "goal_type": "weight",
                "description": "Lean out",
                "target_value": 72,
                "unit": "kg",
                "status": "active",
            }
        ],
    )
    started = "2024-05-01T07:00:00+00:00"
    client.table("activities").queue(
        "select",
        [
            {
                "id": str(uuid4()),
                "activity_type": "run",
                "start_time": started,
                "duration_minutes": 30,
                "calories_burned": 310,
            }
        ],
    )
    client.table("workouts").queue(
        "select", [{"id": str(uuid4()), "name": "Legs", "start_time": started}]
    )
    start = datetime(2024, 4, 24, tzinfo=UTC)
    end = datetime(2024, 5, 2, tzinfo=UTC)

    profile = SupabaseUserRepository(client).get_user(user_id)
    goals = SupabaseGoalRepository(client).list_goals(user_id, "active")
    activity_repository = SupabaseActivityRepository(client)
    activities = activity_repository.list_activities(user_id, start, end)
    workouts = activity_repository.list_workouts(user_id, start, end)

    assert profile is not None
    assert profile.full_name == "Ada Lovelace"
    assert goals[0].target_value == 72.0
    assert activities[0].calories_burned == 310
    assert workouts[0].name == "Legs"
    assert workouts[0].duration_minutes is None
    assert SupabaseUserRepository(client).get_user(uuid4()) is None


def test_supabase_metric_repository() -> None:
    client = FakeSupabaseClient()
    metrics = client.table("metrics")
    user_id = uuid4()
    metric = Metric(uuid4(), "weight", 70.5, "kg", datetime(2024, 5, 1, tzinfo=UTC))
    metrics.queue("insert", [{"id": str(metric.id)}])
    metrics.queue(
        "select",
        [
            {
                "id": str(metric.id),
                "metric_type": "weight",
                "value": 70.5,
                "unit": "kg",
                "measured_at": "2024-05-01T00:00:00+00:00",
            }
        ],
    )

    repository = SupabaseMetricRepository(client)
    created_id = repository.create_metric(user_id, metric)
    listed = repository.list_metrics(
        user_id, "weight", datetime(2024, 4, 1, tzinfo=UTC), datetime(2024, 5, 2, tzinfo=UTC)
    )

    assert created_id == metric.id
    assert metrics.payloads[0]["measured_at"] == "2024-05-01T00:00:00+00:00"
    assert listed == [metric]
