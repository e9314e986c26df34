"""Supabase repository for body metrics."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_coach.domain.tracking import Metric
from fitness_coach.services.tracking import MetricRepository


@dataclass
class SupabaseMetricRepository(MetricRepository):
    """Supabase implementation for body metrics."""

    client: Client

    def create_metric(self, user_id: UUID, metric: Metric) -> UUID:
        """Insert a metric row and return its id."""
        response = (
            self.client.table("metrics")
            .insert(
                {
                    "id": str(metric.id),
                    "user_id": str(user_id),
                    "metric_type": metric.metric_type,
                    "value": metric.value,
                    "unit": metric.unit,
                    "measured_at": metric.recorded_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create metric")
        return UUID(response.data[0]["id"])

    def list_metrics(
        self, user_id: UUID, metric_type: str, start: datetime, end: datetime
    ) -> list[Metric]:
        """Return metrics of one type measured within a time range."""
        response = (
            self.client.table("metrics")
            .select("id, metric_type, value, unit, measured_at")
            .eq("user_id", str(user_id))
            .eq("metric_type", metric_type)
            .gte("measured_at", start.isoformat())
            .lt("measured_at", end.isoformat())
            .order("measured_at")
            .execute()
        )
        return [
            Metric(
                id=UUID(row["id"]),
                metric_type=str(row.get("metric_type", metric_type)),
                value=float(row.get("value") or 0.0),
                unit=str(row.get("unit") or ""),
                recorded_at=datetime.fromisoformat(row["measured_at"]),
            )
            for row in response.data or []
        ]
