"""Supabase repository for goals."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_coach.domain.tracking import Goal
from fitness_coach.services.tracking import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for goals."""

    client: Client

    def list_goals(self, user_id: UUID, status: str) -> list[Goal]:
        """Return goals for a user filtered by status."""
        response = (
            self.client.table("goals")
            .select("id, goal_type, description, target_value, unit, status")
            .eq("user_id", str(user_id))
            .eq("status", status)
            .order("created_at", desc=True)
            .execute()
        )
        return [
            Goal(
                id=UUID(row["id"]),
                goal_type=str(row.get("goal_type", "")),
                description=str(row.get("description") or ""),
                target_value=float(row.get("target_value") or 0.0),
                unit=str(row.get("unit") or ""),
                status=str(row.get("status", status)),
            )
            for row in response.data or []
        ]
