"""Tests for the HTTP-based FDC adapter."""

import asyncio
import json

import httpx
import pytest

from dish_nutrition.adapters.fdc_client import DEFAULT_DATA_TYPES, HttpxFdcClient
from dish_nutrition.domain.errors import FoodLookupError, FoodLookupErrorKind


def _client(handler) -> HttpxFdcClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_fdc_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": []})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    client = _client(handler)

    search = asyncio.run(client.search_foods("rice", page_size=5))
    food = asyncio.run(client.get_food(1))

    assert search == {"foods": []}
    assert food["fdcId"] == 1
    search_request, food_request = seen
    assert search_request.method == "POST"
    assert search_request.url.params["api_key"] == "key"
    body = json.loads(search_request.content.decode())
    assert body == {
        "query": "rice",
        "pageSize": 5,
        "dataType": list(DEFAULT_DATA_TYPES),
    }
    assert food_request.method == "GET"
    assert food_request.url.path == "/food/1"


@pytest.mark.parametrize(
    ("status_code", "kind"),
    [
        (401, FoodLookupErrorKind.UNAUTHORIZED),
        (403, FoodLookupErrorKind.UNAUTHORIZED),
        (404, FoodLookupErrorKind.NOT_FOUND),
        (429, FoodLookupErrorKind.RATE_LIMITED),
        (500, FoodLookupErrorKind.UPSTREAM),
    ],
)
def test_fdc_client_maps_status_codes(
    status_code: int, kind: FoodLookupErrorKind
) -> None:
    client = _client(lambda request: httpx.Response(status_code, json={}))

    with pytest.raises(FoodLookupError) as exc_info:
        asyncio.run(client.get_food(1))

    assert exc_info.value.kind is kind
    assert exc_info.value.status_code == status_code


def test_fdc_client_maps_timeouts_and_network_errors() -> None:
    def timeout_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    def network_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(FoodLookupError) as timeout_info:
        asyncio.run(_client(timeout_handler).search_foods("rice"))
    with pytest.raises(FoodLookupError) as network_info:
        asyncio.run(_client(network_handler).search_foods("rice"))

    assert timeout_info.value.kind is FoodLookupErrorKind.TIMEOUT
    assert network_info.value.kind is FoodLookupErrorKind.NETWORK


def test_fdc_client_rejects_invalid_json() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(FoodLookupError) as exc_info:
        asyncio.run(client.get_food(1))

    assert exc_info.value.kind is FoodLookupErrorKind.INVALID_RESPONSE


def test_fdc_client_close() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))

    asyncio.run(client.close())

    assert client.http_client.is_closed
