"""USDA FoodData Central provider with caching, retry, and timeouts."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from healthos_nutrition.adapters.usda_client import UsdaClient
from healthos_nutrition.domain.errors import ProviderError, ProviderTransientError
from healthos_nutrition.domain.nutrition import (
    DEFAULT_PORTION_G,
    CatalogEntry,
    CatalogSource,
    UsdaFoodSummary,
    normalize_name,
)
from healthos_nutrition.domain.results import ProviderResult
from healthos_nutrition.services.cache import Cache
from healthos_nutrition.services.nutrient_mapper import map_usda_nutrients

PROVIDER = "usda"
_TOO_MANY_REQUESTS = 429
_SERVER_ERROR = 500
_GRAM_UNITS = {"g", "grm"}

_logger = logging.getLogger(__name__)


@dataclass
class UsdaProvider:
    """Search and detail lookups against FoodData Central.

    Searches are cached by ``(query, page_size)``; detail fetches are not.
    HTTP 429 and 5xx responses are retried ``retry_attempts`` times after a
    fixed delay before surfacing as ``ProviderTransientError``.
    """

    client: UsdaClient
    cache: Cache
    retry_attempts: int = 1
    retry_delay_seconds: float = 1.0
    timeout_seconds: float = 8.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def search(self, query: str, limit: int = 5) -> list[UsdaFoodSummary]:
        """Search curated FDC foods, returning at most ``limit`` hits."""
        cache_key = (query, limit)
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            _logger.debug("USDA search cache hit: query=%s", query)
            return cached

        payload = await self._call(
            lambda: self.client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = payload.get("foods") if isinstance(payload, dict) else None
        results = [
            _parse_summary(food)
            for food in (foods if isinstance(foods, list) else [])
            if isinstance(food, dict) and isinstance(food.get("fdcId"), int)
        ][:limit]
        self.cache.set(cache_key, results)
        _logger.info("USDA search: query=%s results=%s", query, len(results))
        return results

    async def fetch_details(self, fdc_id: int) -> CatalogEntry:
        """Fetch the full nutrient breakdown for one food as a catalog entry."""
        payload = await self._call(
            lambda: self.client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        if not isinstance(payload, dict):
            raise ProviderError(PROVIDER, f"Malformed detail payload for {fdc_id}")
        description = str(payload.get("description") or "").strip()
        if not description:
            raise ProviderError(PROVIDER, f"Food {fdc_id} has no description")
        return CatalogEntry(
            name=description,
            name_normalized=normalize_name(description),
            source=CatalogSource.USDA,
            source_id=str(payload.get("fdcId", fdc_id)),
            default_portion_g=_default_portion(payload),
            per_100g=map_usda_nutrients(payload.get("foodNutrients", [])),
            brand=payload.get("brandOwner"),
        )

    async def try_search(
        self, query: str, limit: int = 5
    ) -> ProviderResult[list[UsdaFoodSummary]]:
        """Search, returning failures as a result instead of raising."""
        try:
            return ProviderResult.success(await self.search(query, limit))
        except ProviderError as exc:
            return ProviderResult.failure(exc)
        except Exception as exc:
            _logger.exception("Unexpected provider failure")
            return ProviderResult.failure(ProviderError(PROVIDER, str(exc)))

    async def try_fetch_details(self, fdc_id: int) -> ProviderResult[CatalogEntry]:
        """Fetch details, returning failures as a result instead of raising."""
        try:
            return ProviderResult.success(await self.fetch_details(fdc_id))
        except ProviderError as exc:
            return ProviderResult.failure(exc)
        except Exception as exc:
            _logger.exception("Unexpected provider failure")
            return ProviderResult.failure(ProviderError(PROVIDER, str(exc)))

    async def _call(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call the client with a deadline and a short retry on 429/5xx."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
            except TimeoutError as exc:
                raise ProviderError(PROVIDER, f"{action} timed out") from exc
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if not _is_retryable(status_code):
                    raise ProviderError(
                        PROVIDER, f"{action} failed with HTTP {status_code}"
                    ) from exc
                _logger.warning(
                    "USDA %s failed (attempt %s/%s, status=%s)",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    status_code,
                )
                if attempt > self.retry_attempts:
                    raise ProviderTransientError(PROVIDER, status_code) from exc
                await self.sleep(self.retry_delay_seconds)
            except (httpx.HTTPError, ValueError) as exc:
                raise ProviderError(PROVIDER, f"{action} failed: {exc}") from exc


def _is_retryable(status_code: int) -> bool:
    return status_code == _TOO_MANY_REQUESTS or status_code >= _SERVER_ERROR


def _default_portion(payload: dict[str, object]) -> float:
    """Use the labelled serving when it is expressed in grams."""
    serving_size = payload.get("servingSize")
    unit = str(payload.get("servingSizeUnit") or "g").lower()
    if (
        isinstance(serving_size, int | float)
        and serving_size > 0
        and unit in _GRAM_UNITS
    ):
        return float(serving_size)
    return DEFAULT_PORTION_G


def _parse_summary(food: dict[str, object]) -> UsdaFoodSummary:
    return UsdaFoodSummary(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description", "")),
        data_type=food.get("dataType"),
        brand_owner=food.get("brandOwner"),
    )
