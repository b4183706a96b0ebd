"""Nutrition service integrating USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from dish_nutrition.adapters.fdc_client import FdcClient
from dish_nutrition.domain.errors import FoodLookupError, FoodLookupErrorKind
from dish_nutrition.domain.nutrition import (
    FoodDetails,
    FoodSummary,
    Ingredient,
    NutritionProfile,
)
from dish_nutrition.services.cache import Cache

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "fiber": 1079,
    "sugar": 2000,
}

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Service for food lookups with caching and a short retry."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[FoodSummary]:
        """Search FDC foods with caching."""
        normalized = query.strip()
        if not normalized:
            return []
        cache_key = f"fdc:search:{normalized.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(normalized, page_size=limit),
            action="search",
        )
        foods = [
            _parse_summary(food)
            for food in _as_list(payload.get("foods"))
            if isinstance(food, dict) and "fdcId" in food
        ]
        self.cache.set(cache_key, list(foods), ttl_seconds=self.search_ttl_seconds)
        _logger.info("FDC search: query=%s results=%s", normalized, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FoodDetails:
        """Retrieve food details with a per-100 g profile from FDC."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        if "fdcId" not in payload:
            raise FoodLookupError(
                FoodLookupErrorKind.INVALID_RESPONSE,
                f"FDC food {fdc_id} payload has no fdcId",
            )
        serving_size = payload.get("servingSize")
        details = FoodDetails(
            summary=_parse_summary(payload),
            profile=_extract_profile(_as_list(payload.get("foodNutrients"))),
            serving_size_g=(
                float(serving_size) if isinstance(serving_size, int | float) else None
            ),
        )
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        return details

    async def get_profile(self, fdc_id: int) -> NutritionProfile:
        """Return the per-100 g nutrition profile for an FDC food."""
        details = await self.get_food(fdc_id)
        return details.profile

    async def resolve_ingredients(
        self, ingredients: list[Ingredient]
    ) -> list[Ingredient]:
        """Attach FDC profiles to ingredients that reference a food but lack one.

        Lookup failures leave the ingredient unresolved.
        """
        resolved: list[Ingredient] = []
        for ingredient in ingredients:
            if ingredient.nutrition is not None or ingredient.source_id is None:
                resolved.append(ingredient)
                continue
            try:
                profile = await self.get_profile(ingredient.source_id)
            except FoodLookupError as exc:
                _logger.warning(
                    "Could not resolve ingredient %s (fdc_id=%s, kind=%s): %s",
                    ingredient.name,
                    ingredient.source_id,
                    exc.kind,
                    exc.message,
                )
                resolved.append(ingredient)
                continue
            resolved.append(replace(ingredient, nutrition=profile))
        return resolved

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function, retrying transient lookup failures."""
        attempt = 0
        while True:
            try:
                return await func()
            except FoodLookupError as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, kind=%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc.kind,
                    exc.status_code or "n/a",
                    exc.message,
                )
                if not exc.kind.retryable or attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _as_list(value: object) -> list[object]:
    return value if isinstance(value, list) else []


def _parse_summary(food: dict[str, object]) -> FoodSummary:
    brand_owner = food.get("brandOwner")
    data_type = food.get("dataType")
    try:
        fdc_id = int(food["fdcId"])
    except (TypeError, ValueError) as exc:
        raise FoodLookupError(
            FoodLookupErrorKind.INVALID_RESPONSE,
            f"FDC returned a non-numeric fdcId: {food['fdcId']!r}",
        ) from exc
    return FoodSummary(
        fdc_id=fdc_id,
        description=str(food.get("description", "")),
        brand_owner=brand_owner if isinstance(brand_owner, str) else None,
        data_type=data_type if isinstance(data_type, str) else None,
    )


def _extract_profile(food_nutrients: list[object]) -> NutritionProfile:
    """Extract per-100 g values from FDC nutrients.

    Core macros default to 0 when absent; fiber and sugar stay None.
    """
    values: dict[str, float] = {}
    ids_to_names = {nutrient_id: name for name, nutrient_id in _NUTRIENT_IDS.items()}
    for nutrient in food_nutrients:
        if not isinstance(nutrient, dict):
            continue
        nutrient_info = nutrient.get("nutrient")
        if not isinstance(nutrient_info, dict):
            nutrient_info = {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        if not isinstance(nutrient_id, int):
            continue
        amount = nutrient.get("amount")
        name = ids_to_names.get(nutrient_id)
        if name is not None and isinstance(amount, int | float):
            values[name] = float(amount)

    return NutritionProfile(
        calories=values.get("calories", 0.0),
        protein_g=values.get("protein", 0.0),
        carbs_g=values.get("carbs", 0.0),
        fat_g=values.get("fat", 0.0),
        fiber_g=values.get("fiber"),
        sugar_g=values.get("sugar"),
    )
