"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_coach.adapters.openrouter_client import HttpxOpenRouterClient
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
from fitness_coach.config import Settings
from fitness_coach.services.agent import AgentService
from fitness_coach.services.agent_tools import AgentToolbox
from fitness_coach.services.completions import CompletionGateway
from fitness_coach.services.foods import FoodResolver
from fitness_coach.services.meal_parser import MealParserService
from fitness_coach.services.meals import MealService
from fitness_coach.services.tracking import TrackingService
from fitness_coach.services.vision import VisionGateway


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    completion_gateway: CompletionGateway
    meal_parser: MealParserService
    meal_service: MealService
    tracking_service: TrackingService
    agent_service: AgentService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    conversation_repository = SupabaseConversationRepository(supabase_client)

    openrouter_client = HttpxOpenRouterClient.create(
        api_key=resolved_settings.openrouter_api_key,
        base_url=resolved_settings.openrouter_base_url,
        timeout=resolved_settings.completion_timeout_seconds,
    )
    completion_gateway = CompletionGateway(
        client=openrouter_client,
        default_model=resolved_settings.openrouter_model,
        temperature=resolved_settings.completion_temperature,
        max_tokens=resolved_settings.completion_max_tokens,
        max_attempts=resolved_settings.completion_max_attempts,
        retry_delay_seconds=resolved_settings.completion_retry_delay_seconds,
    )
    vision_gateway = VisionGateway(
        completions=completion_gateway, model=resolved_settings.vision_model
    )
    resolver = FoodResolver(repository=food_repository, completions=completion_gateway)
    meal_parser = MealParserService(
        completions=completion_gateway, vision=vision_gateway, resolver=resolver
    )
    meal_service = MealService(foods=food_repository, repository=meal_repository)
    tracking_service = TrackingService(
        users=SupabaseUserRepository(supabase_client),
        goals=SupabaseGoalRepository(supabase_client),
        activities=SupabaseActivityRepository(supabase_client),
        metrics=SupabaseMetricRepository(supabase_client),
        meals=meal_repository,
    )
    agent_service = AgentService(
        completions=completion_gateway,
        conversations=conversation_repository,
        tracking=tracking_service,
        toolbox=AgentToolbox(
            meals=meal_service, tracking=tracking_service, foods=food_repository
        ),
    )

    async def close_resources() -> None:
        await openrouter_client.close()

    return AppContainer(
        settings=resolved_settings,
        completion_gateway=completion_gateway,
        meal_parser=meal_parser,
        meal_service=meal_service,
        tracking_service=tracking_service,
        agent_service=agent_service,
        close_resources=close_resources,
    )
