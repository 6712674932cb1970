"""OpenFoodFacts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_FIELDS = "code,product_name,brands,nutriments,serving_size,serving_quantity"


class OpenFoodFactsClient(Protocol):
    """Interface for OpenFoodFacts API interactions."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product payload by barcode, or None when unknown."""

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        """Search products by name and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed OpenFoodFacts client.

    The API is unauthenticated; requests identify the application through a
    descriptive User-Agent as the OpenFoodFacts usage policy asks.
    """

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 15
    ) -> "HttpxOpenFoodFactsClient":
        """Create an OpenFoodFacts client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a single product by exact barcode."""
        url = f"{self.base_url}/product/{barcode}"
        response = await self.http_client.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        """Search products by free text."""
        url = f"{self.base_url}/search"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": query,
                "page_size": str(page_size),
                "json": "true",
                "fields": SEARCH_FIELDS,
            },
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
