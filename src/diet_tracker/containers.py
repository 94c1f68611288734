"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.nutrient_function_client import (
    HttpxNutrientFunctionClient,
)
from diet_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from diet_tracker.adapters.supabase_save_repository import SupabaseSaveRepository
from diet_tracker.adapters.totals_client import HttpxTotalsClient
from diet_tracker.adapters.unconfigured_repository import UnconfiguredDietRepository
from diet_tracker.config import Settings
from diet_tracker.services.foods import (
    ConversionResolver,
    FoodRepository,
    FoodSearchService,
)
from diet_tracker.services.saves import SaveRepository, SaveService
from diet_tracker.services.totals import TotalsProxyService
from diet_tracker.services.workspace import DietWorkspace

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    search_service: FoodSearchService
    conversion_resolver: ConversionResolver
    save_service: SaveService
    totals_proxy: TotalsProxyService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    missing = resolved_settings.missing_backend_settings()
    food_repository: FoodRepository
    save_repository: SaveRepository
    function_client: HttpxNutrientFunctionClient | None
    if missing:
        _logger.warning("Backend not configured, missing %s", ", ".join(missing))
        food_repository = save_repository = UnconfiguredDietRepository()
        function_client = None
    else:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        food_repository = SupabaseFoodRepository(supabase_client)
        save_repository = SupabaseSaveRepository(supabase_client)
        function_client = HttpxNutrientFunctionClient.create(
            supabase_url=resolved_settings.supabase_url,
            service_key=resolved_settings.supabase_service_key,
            function_name=resolved_settings.nutrient_function_name,
            timeout=resolved_settings.upstream_timeout_seconds,
        )
    conversion_resolver = ConversionResolver(food_repository)

    async def close_resources() -> None:
        if function_client is not None:
            await function_client.close()

    return AppContainer(
        settings=resolved_settings,
        search_service=FoodSearchService(food_repository),
        conversion_resolver=conversion_resolver,
        save_service=SaveService(save_repository, conversion_resolver),
        totals_proxy=TotalsProxyService(function_client),
        close_resources=close_resources,
    )


def build_workspace(container: AppContainer, owner_id: str | None = None) -> DietWorkspace:
    """Create a page model that talks to the proxy route over HTTP."""
    return DietWorkspace(
        search_service=container.search_service,
        resolver=container.conversion_resolver,
        save_service=container.save_service,
        totals_client=HttpxTotalsClient.create(
            container.settings.api_base_url,
            timeout=container.settings.upstream_timeout_seconds,
        ),
        owner_id=owner_id,
    )
