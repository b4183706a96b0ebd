"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from dish_nutrition.adapters.fdc_client import HttpxFdcClient
from dish_nutrition.adapters.supabase_dish_repository import SupabaseDishRepository
from dish_nutrition.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from dish_nutrition.config import Settings
from dish_nutrition.services.cache import InMemoryCache
from dish_nutrition.services.dishes import DishService
from dish_nutrition.services.nutrition import NutritionService
from dish_nutrition.services.sessions import SessionService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    dish_service: DishService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    if resolved_settings.uses_demo_fdc_key:
        _logger.warning(
            "Using DEMO_KEY for the FDC API; set FDC_API_KEY for higher rate limits"
        )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.fdc_search_ttl_seconds,
        food_ttl_seconds=resolved_settings.fdc_food_ttl_seconds,
    )
    dish_service = DishService(
        repository=SupabaseDishRepository(supabase_client),
        nutrition_service=nutrition_service,
    )
    session_service = SessionService(SupabaseSessionRepository(supabase_client))

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        dish_service=dish_service,
        session_service=session_service,
        close_resources=close_resources,
    )
