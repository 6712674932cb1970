"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

import httpx
import pytest

from healthos_nutrition.adapters.openfoodfacts_client import OpenFoodFactsClient
from healthos_nutrition.adapters.usda_client import UsdaClient
from healthos_nutrition.config import Settings
from healthos_nutrition.containers import AppContainer
from healthos_nutrition.domain.food_log import FoodLogEntry
from healthos_nutrition.domain.nutrition import (
    CatalogEntry,
    CatalogSource,
    NutritionProfile,
)
from healthos_nutrition.services.cache import InMemoryCache
from healthos_nutrition.services.catalog import CatalogService, CatalogStore
from healthos_nutrition.services.food_log import FoodLogRepository, FoodLogService
from healthos_nutrition.services.openfoodfacts import OpenFoodFactsProvider
from healthos_nutrition.services.rate_limiter import RateLimiter
from healthos_nutrition.services.resolution import ResolutionAggregator
from healthos_nutrition.services.usda import UsdaProvider


@dataclass
class FakeClock:
    """Manually advanced clock whose sleep moves time forward instantly."""

    now: float = 1000.0
    sleeps: list[float] = field(default_factory=list)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def usda_food_payload(fdc_id: int, description: str) -> dict[str, object]:
    return {
        "fdcId": fdc_id,
        "description": description,
        "dataType": "SR Legacy",
        "foodNutrients": [
            {"nutrient": {"id": 1008, "number": "208"}, "amount": 165},
            {"nutrient": {"id": 1003, "number": "203"}, "amount": 31},
            {"nutrient": {"id": 1004, "number": "204"}, "amount": 3.6},
            {"nutrient": {"id": 1005, "number": "205"}, "amount": 0},
            {"nutrient": {"id": 1162, "number": "401"}, "amount": 0.0},
            {"nutrient": {"id": 1087, "number": "301"}, "amount": 15},
        ],
    }


@dataclass
class FakeUsdaClient(UsdaClient):
    """Fake FDC client with in-memory responses and call recording."""

    foods: dict[int, str] = field(
        default_factory=lambda: {
            171077: "Chicken, broiler, breast, meat only, cooked, roasted",
            171477: "Chicken, broilers or fryers, breast, skinless, boneless",
            173944: "Rice, white, long-grain, regular, cooked",
            169761: "Chicken, ground, raw",
            171450: "Chicken, thigh, meat only, raw",
        }
    )
    search_error: Exception | None = None
    food_errors: dict[int, list[Exception]] = field(default_factory=dict)
    search_calls: list[tuple[str, int]] = field(default_factory=list)
    food_calls: list[int] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.search_calls.append((query, page_size))
        if self.search_error is not None:
            raise self.search_error
        return {
            "foods": [
                {
                    "fdcId": fdc_id,
                    "description": description,
                    "dataType": "SR Legacy",
                }
                for fdc_id, description in self.foods.items()
            ][:page_size]
        }

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls.append(fdc_id)
        errors = self.food_errors.get(fdc_id)
        if errors:
            raise errors.pop(0)
        return usda_food_payload(fdc_id, self.foods.get(fdc_id, "Unknown food"))


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake OpenFoodFacts client with in-memory products."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "5449000214911": {
                "code": "5449000214911",
                "product_name": "Coca-Cola",
                "brands": "Coca-Cola",
                "serving_quantity": 330,
                "nutriments": {
                    "energy-kcal_100g": 42,
                    "sugars_100g": 10.6,
                    "sodium_100g": 0.004,
                },
            }
        }
    )
    search_results: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "code": "3017620422003",
                "product_name": "Nutella",
                "brands": "Ferrero, Nutella",
                "nutriments": {"energy-kcal_100g": 539, "fat_100g": 30.9},
            },
            {"code": "0000000000000", "brands": "Nameless"},
        ]
    )
    error: Exception | None = None
    product_calls: list[str] = field(default_factory=list)
    search_calls: list[tuple[str, int]] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        self.product_calls.append(barcode)
        if self.error is not None:
            raise self.error
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "status_verbose": "product not found"}
        return {"status": 1, "product": product}

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        self.search_calls.append((query, page_size))
        if self.error is not None:
            raise self.error
        return {"products": self.search_results[:page_size]}


@dataclass
class InMemoryCatalogStore(CatalogStore):
    """In-memory catalog store for tests."""

    rows: dict[str, tuple[UUID, CatalogEntry]] = field(default_factory=dict)
    fail: bool = False
    personal_calls: list[tuple[UUID, str, int]] = field(default_factory=list)
    inserts: int = 0

    def add(self, user_id: UUID, entry: CatalogEntry) -> CatalogEntry:
        stored = replace(entry, id=str(uuid4()), times_logged=0)
        self.rows[stored.id] = (user_id, stored)
        return stored

    def find_personal(
        self, user_id: UUID, query: str, limit: int
    ) -> list[CatalogEntry]:
        self.personal_calls.append((user_id, query, limit))
        if self.fail:
            raise RuntimeError("database unavailable")
        needle = query.strip().lower()
        return [
            entry
            for owner, entry in self.rows.values()
            if owner == user_id and needle in entry.name_normalized
        ][:limit]

    def find_by_source_id(
        self, user_id: UUID, source: CatalogSource, source_id: str
    ) -> CatalogEntry | None:
        for owner, entry in self.rows.values():
            if (
                owner == user_id
                and entry.source == source
                and entry.source_id == source_id
            ):
                return entry
        return None

    def insert(self, user_id: UUID, entry: CatalogEntry) -> CatalogEntry:
        if self.fail:
            raise RuntimeError("database unavailable")
        self.inserts += 1
        return self.add(user_id, entry)

    def get_entry(self, user_id: UUID, entry_id: str) -> CatalogEntry | None:
        row = self.rows.get(entry_id)
        if row is None or row[0] != user_id:
            return None
        return row[1]


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    entries: list[FoodLogEntry] = field(default_factory=list)

    def create_entry(self, entry: FoodLogEntry) -> FoodLogEntry:
        created = replace(entry, id=str(uuid4()))
        self.entries.append(created)
        return created


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        usda_api_key="usda-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def add_personal(
    catalog_store: InMemoryCatalogStore, user_id: UUID
) -> Callable[..., CatalogEntry]:
    """Seed the personal catalog of the default test user."""

    def add(name: str, calories: float = 100, **changes: object) -> CatalogEntry:
        entry = CatalogEntry(
            name=name,
            name_normalized=name.lower(),
            source=CatalogSource.PERSONAL,
            per_100g=NutritionProfile(calories=calories, protein_g=10),
            default_portion_g=100,
        )
        return catalog_store.add(user_id, replace(entry, **changes))

    return add


@pytest.fixture
def http_status_error() -> Callable[[int], httpx.HTTPStatusError]:
    """Build the error httpx raises from ``raise_for_status``."""

    def build(status_code: int) -> httpx.HTTPStatusError:
        request = httpx.Request("GET", "https://api.test/resource")
        response = httpx.Response(status_code, request=request)
        return httpx.HTTPStatusError(
            f"HTTP {status_code}", request=request, response=response
        )

    return build


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def usda_client() -> FakeUsdaClient:
    return FakeUsdaClient()


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def usda_provider(usda_client: FakeUsdaClient, clock: FakeClock) -> UsdaProvider:
    return UsdaProvider(
        client=usda_client,
        cache=InMemoryCache(ttl_seconds=300, clock=clock),
        sleep=clock.sleep,
    )


@pytest.fixture
def openfoodfacts_provider(
    openfoodfacts_client: FakeOpenFoodFactsClient, clock: FakeClock
) -> OpenFoodFactsProvider:
    return OpenFoodFactsProvider(
        client=openfoodfacts_client,
        rate_limiter=RateLimiter(
            min_interval_seconds=6, clock=clock, sleep=clock.sleep
        ),
    )


@pytest.fixture
def aggregator(
    catalog_store: InMemoryCatalogStore,
    usda_provider: UsdaProvider,
    openfoodfacts_provider: OpenFoodFactsProvider,
) -> ResolutionAggregator:
    return ResolutionAggregator(
        catalog=CatalogService(catalog_store),
        openfoodfacts=openfoodfacts_provider,
        usda=usda_provider,
    )


@pytest.fixture
def container(
    settings: Settings,
    aggregator: ResolutionAggregator,
    food_log_repository: InMemoryFoodLogRepository,
) -> AppContainer:
    catalog_service = aggregator.catalog
    food_log_service = FoodLogService(
        catalog=catalog_service,
        repository=food_log_repository,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_service=catalog_service,
        resolution_aggregator=aggregator,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )
