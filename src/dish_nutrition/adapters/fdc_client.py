"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from dish_nutrition.domain.errors import FoodLookupError, FoodLookupErrorKind

DEFAULT_DATA_TYPES = ("Survey (FNDDS)", "Foundation", "SR Legacy")

_STATUS_KINDS = {
    401: FoodLookupErrorKind.UNAUTHORIZED,
    403: FoodLookupErrorKind.UNAUTHORIZED,
    404: FoodLookupErrorKind.NOT_FOUND,
    429: FoodLookupErrorKind.RATE_LIMITED,
}


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client.

    Transport and HTTP status failures are raised as ``FoodLookupError``.
    """

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15
    data_types: tuple[str, ...] = DEFAULT_DATA_TYPES

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 15
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query, limited to the configured data types."""
        return await self._request(
            "POST",
            f"{self.base_url}/foods/search",
            json={
                "query": query,
                "pageSize": page_size,
                "dataType": list(self.data_types),
            },
        )

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id."""
        return await self._request("GET", f"{self.base_url}/food/{fdc_id}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self, method: str, url: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        try:
            response = await self.http_client.request(
                method,
                url,
                params={"api_key": self.api_key},
                json=json,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FoodLookupError(
                FoodLookupErrorKind.TIMEOUT, f"FDC request timed out: {url}"
            ) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            kind = _STATUS_KINDS.get(status_code, FoodLookupErrorKind.UPSTREAM)
            raise FoodLookupError(
                kind, f"FDC returned HTTP {status_code}", status_code=status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise FoodLookupError(
                FoodLookupErrorKind.NETWORK, f"FDC request failed: {exc}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise FoodLookupError(
                FoodLookupErrorKind.INVALID_RESPONSE, "FDC returned invalid JSON"
            ) from exc
        if not isinstance(payload, dict):
            raise FoodLookupError(
                FoodLookupErrorKind.INVALID_RESPONSE, "FDC returned a non-object body"
            )
        return payload
