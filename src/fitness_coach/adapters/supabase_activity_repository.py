"""Supabase repository for activities and workouts."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_coach.domain.tracking import Activity, Workout
from fitness_coach.services.tracking import ActivityRepository


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase implementation for activity and workout history."""

    client: Client

    def list_activities(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[Activity]:
        """Return activities started within a time range."""
        rows = self._list_rows(
            "activities",
            "id, activity_type, start_time, duration_minutes, calories_burned",
            user_id,
            start,
            end,
        )
        return [
            Activity(
                id=UUID(row["id"]),
                activity_type=str(row.get("activity_type", "")),
                start_time=datetime.fromisoformat(row["start_time"]),
                duration_minutes=row.get("duration_minutes"),
                calories_burned=row.get("calories_burned"),
            )
            for row in rows
        ]

    def list_workouts(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[Workout]:
        """Return workouts started within a time range."""
        rows = self._list_rows(
            "workouts", "id, name, start_time, duration_minutes", user_id, start, end
        )
        return [
            Workout(
                id=UUID(row["id"]),
                name=str(row.get("name", "")),
                start_time=datetime.fromisoformat(row["start_time"]),
                duration_minutes=row.get("duration_minutes"),
            )
            for row in rows
        ]

    def _list_rows(
        self, table: str, columns: str, user_id: UUID, start: datetime, end: datetime
    ) -> list[dict[str, object]]:
        response = (
            self.client.table(table)
            .select(columns)
            .eq("user_id", str(user_id))
            .gte("start_time", start.isoformat())
            .lt("start_time", end.isoformat())
            .order("start_time", desc=True)
            .execute()
        )
        return response.data or []
