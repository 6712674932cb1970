"""OpenFoodFacts provider with request throttling."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from healthos_nutrition.adapters.openfoodfacts_client import OpenFoodFactsClient
from healthos_nutrition.domain.errors import ProviderError
from healthos_nutrition.domain.nutrition import (
    DEFAULT_PORTION_G,
    CatalogEntry,
    CatalogSource,
    normalize_name,
)
from healthos_nutrition.domain.results import ProviderResult
from healthos_nutrition.services.nutrient_mapper import map_openfoodfacts_nutriments
from healthos_nutrition.services.rate_limiter import RateLimiter

PROVIDER = "openfoodfacts"
_FOUND = 1

_logger = logging.getLogger(__name__)


@dataclass
class OpenFoodFactsProvider:
    """Barcode and name lookups against OpenFoodFacts.

    Every request passes through the shared rate limiter. The crowdsourced
    database is best-effort: there is no cache and no retry.
    """

    client: OpenFoodFactsClient
    rate_limiter: RateLimiter
    timeout_seconds: float = 8.0

    async def search_by_barcode(self, barcode: str) -> CatalogEntry | None:
        """Look up one product by exact code; None when the code is unknown."""
        payload = await self._call(
            lambda: self.client.get_product(barcode), action=f"product:{barcode}"
        )
        if not isinstance(payload, dict) or payload.get("status") != _FOUND:
            _logger.info("OpenFoodFacts barcode not found: %s", barcode)
            return None
        product = payload.get("product")
        if not isinstance(product, dict):
            return None
        return _to_entry(
            product,
            code=str(product.get("code") or barcode),
            name=str(product.get("product_name") or "Unknown"),
            portion=_serving_quantity(product),
        )

    async def search_by_name(self, query: str, limit: int = 5) -> list[CatalogEntry]:
        """Search products by name, skipping those without a display name."""
        payload = await self._call(
            lambda: self.client.search_products(query, page_size=limit),
            action="search",
        )
        products = payload.get("products") if isinstance(payload, dict) else None
        results = [
            _to_entry(
                product,
                code=str(product.get("code") or ""),
                name=str(product["product_name"]),
                portion=DEFAULT_PORTION_G,
            )
            for product in (products if isinstance(products, list) else [])
            if isinstance(product, dict) and product.get("product_name")
        ][:limit]
        _logger.info("OpenFoodFacts search: query=%s results=%s", query, len(results))
        return results

    async def try_search_by_barcode(
        self, barcode: str
    ) -> ProviderResult[CatalogEntry | None]:
        """Barcode lookup returning failures as a result instead of raising."""
        try:
            return ProviderResult.success(await self.search_by_barcode(barcode))
        except ProviderError as exc:
            return ProviderResult.failure(exc)
        except Exception as exc:
            _logger.exception("Unexpected provider failure")
            return ProviderResult.failure(ProviderError(PROVIDER, str(exc)))

    async def try_search_by_name(
        self, query: str, limit: int = 5
    ) -> ProviderResult[list[CatalogEntry]]:
        """Name search returning failures as a result instead of raising."""
        try:
            return ProviderResult.success(await self.search_by_name(query, limit))
        except ProviderError as exc:
            return ProviderResult.failure(exc)
        except Exception as exc:
            _logger.exception("Unexpected provider failure")
            return ProviderResult.failure(ProviderError(PROVIDER, str(exc)))

    async def _call(
        self, func: Callable[[], Awaitable[dict[str, object] | None]], *, action: str
    ) -> dict[str, object] | None:
        await self.rate_limiter.acquire()
        try:
            return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
        except TimeoutError as exc:
            raise ProviderError(PROVIDER, f"{action} timed out") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(PROVIDER, f"{action} failed: {exc}") from exc


def _to_entry(
    product: dict[str, object], *, code: str, name: str, portion: float
) -> CatalogEntry:
    brand = _first_brand(product.get("brands"))
    return CatalogEntry(
        name=f"{name} ({brand})" if brand else name,
        name_normalized=normalize_name(name),
        source=CatalogSource.OPENFOODFACTS,
        source_id=code or None,
        barcode=code or None,
        default_portion_g=portion,
        per_100g=map_openfoodfacts_nutriments(product.get("nutriments") or {}),
        brand=brand,
    )


def _first_brand(brands: object) -> str | None:
    """OpenFoodFacts lists brands comma separated; keep the first."""
    if not isinstance(brands, str):
        return None
    return brands.split(",")[0].strip() or None


def _serving_quantity(product: dict[str, object]) -> float:
    quantity = product.get("serving_quantity")
    try:
        value = float(quantity) if quantity is not None else 0.0
    except (TypeError, ValueError):
        value = 0.0
    return value if value > 0 else DEFAULT_PORTION_G
