"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from healthos_nutrition.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from healthos_nutrition.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from healthos_nutrition.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from healthos_nutrition.adapters.usda_client import HttpxUsdaClient
from healthos_nutrition.config import Settings, require_usda_api_key
from healthos_nutrition.domain.errors import ConfigurationError
from healthos_nutrition.services.cache import InMemoryCache
from healthos_nutrition.services.catalog import CatalogService
from healthos_nutrition.services.food_log import FoodLogService
from healthos_nutrition.services.openfoodfacts import OpenFoodFactsProvider
from healthos_nutrition.services.rate_limiter import RateLimiter
from healthos_nutrition.services.resolution import ResolutionAggregator
from healthos_nutrition.services.usda import UsdaProvider

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    resolution_aggregator: ResolutionAggregator
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    The USDA cache and the OpenFoodFacts rate limiter live here, once per
    process, and are shared by every request.
    """
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_service = CatalogService(SupabaseCatalogRepository(supabase_client))
    food_log_service = FoodLogService(
        catalog=catalog_service,
        repository=SupabaseFoodLogRepository(supabase_client),
    )

    usda_client: HttpxUsdaClient | None = None
    usda_provider: UsdaProvider | None = None
    try:
        usda_client = HttpxUsdaClient.create(
            api_key=require_usda_api_key(resolved_settings),
            base_url=resolved_settings.usda_base_url,
        )
    except ConfigurationError as exc:
        _logger.warning("USDA lookups disabled: %s", exc)
    else:
        usda_provider = UsdaProvider(
            client=usda_client,
            cache=InMemoryCache(ttl_seconds=resolved_settings.usda_search_ttl_seconds),
            timeout_seconds=resolved_settings.provider_timeout_seconds,
        )

    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        user_agent=resolved_settings.openfoodfacts_user_agent,
    )
    openfoodfacts_provider = OpenFoodFactsProvider(
        client=openfoodfacts_client,
        rate_limiter=RateLimiter(
            min_interval_seconds=resolved_settings.openfoodfacts_min_interval_seconds
        ),
        timeout_seconds=resolved_settings.provider_timeout_seconds,
    )
    resolution_aggregator = ResolutionAggregator(
        catalog=catalog_service,
        openfoodfacts=openfoodfacts_provider,
        usda=usda_provider,
    )

    async def close_resources() -> None:
        await openfoodfacts_client.close()
        if usda_client is not None:
            await usda_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        resolution_aggregator=resolution_aggregator,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )
