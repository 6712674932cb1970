"""Merge the personal catalog and external providers into one search result."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TypeVar
from uuid import UUID

from healthos_nutrition.domain.nutrition import CatalogEntry, SearchResultEnvelope
from healthos_nutrition.domain.results import ProviderResult
from healthos_nutrition.services.catalog import PERSONAL_SEARCH_LIMIT, CatalogService
from healthos_nutrition.services.openfoodfacts import OpenFoodFactsProvider
from healthos_nutrition.services.query import clean_query, is_barcode
from healthos_nutrition.services.usda import UsdaProvider

# Quota policy: external sources are only consulted while the user's own
# catalog (and then USDA) leaves room below these thresholds.
USDA_PERSONAL_THRESHOLD = 3
USDA_SEARCH_LIMIT = 5
USDA_DETAIL_LIMIT = 3
OPENFOODFACTS_TOTAL_THRESHOLD = 5
OPENFOODFACTS_SEARCH_LIMIT = 5

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class ResolutionAggregator:
    """Resolves a food query against every source under the quota policy.

    A failing external provider contributes zero results; only a failure of
    the personal catalog fails the request. ``usda`` is None when the USDA
    API key is not configured, which skips that step.
    """

    catalog: CatalogService
    openfoodfacts: OpenFoodFactsProvider
    usda: UsdaProvider | None = None

    async def resolve(
        self, user_id: UUID, raw_query: str | None
    ) -> SearchResultEnvelope:
        """Search all sources and return the grouped results."""
        query = clean_query(raw_query)
        barcode = is_barcode(query)

        personal = self.catalog.search_personal(user_id, query, PERSONAL_SEARCH_LIMIT)

        usda: list[CatalogEntry] = []
        if len(personal) < USDA_PERSONAL_THRESHOLD and not barcode:
            usda = await self._resolve_usda(query)

        openfoodfacts: list[CatalogEntry] = []
        if barcode:
            openfoodfacts = await self._resolve_barcode(query)
        elif len(personal) + len(usda) < OPENFOODFACTS_TOTAL_THRESHOLD:
            result = await self.openfoodfacts.try_search_by_name(
                query, OPENFOODFACTS_SEARCH_LIMIT
            )
            openfoodfacts = _fold(result, "OpenFoodFacts name search", query)

        _logger.info(
            "Resolved query=%s personal=%s usda=%s openfoodfacts=%s",
            query,
            len(personal),
            len(usda),
            len(openfoodfacts),
        )
        return SearchResultEnvelope(
            personal=personal, usda=usda, openfoodfacts=openfoodfacts
        )

    async def _resolve_usda(self, query: str) -> list[CatalogEntry]:
        if self.usda is None:
            _logger.debug("USDA step skipped: no API key configured")
            return []
        search = await self.usda.try_search(query, USDA_SEARCH_LIMIT)
        candidates = _fold(search, "USDA search", query)
        details = await asyncio.gather(
            *(
                self.usda.try_fetch_details(candidate.fdc_id)
                for candidate in candidates[:USDA_DETAIL_LIMIT]
            )
        )
        entries: list[CatalogEntry] = []
        for candidate, result in zip(
            candidates[:USDA_DETAIL_LIMIT], details, strict=True
        ):
            if result.error is not None:
                _logger.warning(
                    "USDA detail fetch dropped: fdc_id=%s error=%s",
                    candidate.fdc_id,
                    result.error,
                )
            elif result.value is not None:
                entries.append(result.value)
        return entries

    async def _resolve_barcode(self, barcode: str) -> list[CatalogEntry]:
        result = await self.openfoodfacts.try_search_by_barcode(barcode)
        product = result.unwrap_or(None)
        if result.error is not None:
            _logger.warning(
                "OpenFoodFacts barcode lookup failed: query=%s error=%s",
                barcode,
                result.error,
            )
        return [product] if product is not None else []


def _fold(result: ProviderResult[list[T]], step: str, query: str) -> list[T]:
    """Turn a provider failure into an empty contribution."""
    if result.error is not None:
        _logger.warning("%s failed: query=%s error=%s", step, query, result.error)
        return []
    return result.unwrap_or([])
