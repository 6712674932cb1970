"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from healthos_nutrition.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from healthos_nutrition.adapters.usda_client import HttpxUsdaClient


def test_usda_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": []})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    client = HttpxUsdaClient(
        api_key="key",
        base_url="https://api.test",
        http_client=async_client,
    )

    search = asyncio.run(client.search_foods("rice", page_size=5))
    food = asyncio.run(client.get_food(1))

    assert search == {"foods": []}
    assert food["fdcId"] == 1
    params = seen[0].url.params
    assert params["api_key"] == "key"
    assert params["query"] == "rice"
    assert params["dataType"] == "Foundation,SR Legacy"
    assert params["pageSize"] == "5"
    assert seen[1].url.path == "/food/1"


def test_usda_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    transport = httpx.MockTransport(handler)
    client = HttpxUsdaClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_foods("rice"))


def test_openfoodfacts_client_product_and_search() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/product/5449000214911"):
            return httpx.Response(200, json={"status": 1, "product": {"code": "x"}})
        return httpx.Response(200, json={"products": []})

    transport = httpx.MockTransport(handler)
    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test/api/v2",
        user_agent="HealthOS/1.0 (personal-use)",
        http_client=httpx.AsyncClient(transport=transport),
    )

    product = asyncio.run(client.get_product("5449000214911"))
    search = asyncio.run(client.search_products("nutella", page_size=5))

    assert product == {"status": 1, "product": {"code": "x"}}
    assert search == {"products": []}
    assert all(
        request.headers["User-Agent"] == "HealthOS/1.0 (personal-use)"
        for request in seen
    )
    params = seen[1].url.params
    assert params["search_terms"] == "nutella"
    assert params["page_size"] == "5"
    assert "product_name" in params["fields"]


def test_openfoodfacts_client_unknown_product() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status": 0})

    transport = httpx.MockTransport(handler)
    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test/api/v2",
        user_agent="HealthOS/1.0 (personal-use)",
        http_client=httpx.AsyncClient(transport=transport),
    )

    assert asyncio.run(client.get_product("12345678")) is None
