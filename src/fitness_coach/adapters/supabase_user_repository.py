"""Supabase-backed user profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_coach.domain.tracking import UserProfile
from fitness_coach.services.tracking import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_user(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user id, if present."""
        response = (
            self.client.table("users")
            .select("id, first_name, last_name")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            id=UUID(row["id"]),
            first_name=str(row.get("first_name") or ""),
            last_name=str(row.get("last_name") or ""),
        )
