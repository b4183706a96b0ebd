"""Dish persistence with nutrition snapshots."""

import logging
from dataclasses import asdict, dataclass
from typing import Protocol
from uuid import UUID

from dish_nutrition.domain.dishes import DishDraft, DishRecord, SavedIngredient
from dish_nutrition.domain.errors import NotFoundError, PermissionDeniedError
from dish_nutrition.domain.nutrition import Ingredient, NutritionTotals
from dish_nutrition.domain.sessions import AuthSession
from dish_nutrition.services.calculator import aggregate
from dish_nutrition.services.nutrition import NutritionService

_logger = logging.getLogger(__name__)


class DishRepository(Protocol):
    """Persistence interface for restaurants' dishes."""

    def get_restaurant_owner(self, restaurant_id: UUID) -> UUID | None:
        """Return the owner of a restaurant, or None if it does not exist."""

    def create_dish(
        self, restaurant_id: UUID, payload: dict[str, object]
    ) -> DishRecord:
        """Create a dish row and return it."""

    def update_dish(self, dish_id: UUID, payload: dict[str, object]) -> DishRecord:
        """Update a dish row and return it."""

    def get_dish(self, dish_id: UUID) -> DishRecord | None:
        """Return a dish by id, if present."""

    def list_dishes(self, restaurant_id: UUID) -> list[DishRecord]:
        """Return all dishes of a restaurant."""

    def delete_dish(self, dish_id: UUID) -> None:
        """Delete a dish row."""


@dataclass
class DishService:
    """Application service for creating and editing dishes."""

    repository: DishRepository
    nutrition_service: NutritionService

    async def create_dish(
        self,
        session: AuthSession,
        restaurant_id: UUID,
        draft: DishDraft,
        ingredients: list[Ingredient],
    ) -> DishRecord:
        """Create a dish and store its nutrition snapshot."""
        self._ensure_can_edit(session, restaurant_id)
        totals = await self._compute_totals(ingredients)
        payload = {
            **_draft_payload(draft),
            **_nutrition_payload(totals),
            "ingredients": _ingredients_payload(ingredients),
        }
        dish = self.repository.create_dish(restaurant_id, payload)
        _logger.info(
            "Created dish %s for restaurant %s (%s ingredients, %.0f kcal)",
            dish.id,
            restaurant_id,
            len(ingredients),
            totals.calories,
        )
        return dish

    async def update_dish(
        self,
        session: AuthSession,
        dish_id: UUID,
        draft: DishDraft,
        ingredients: list[Ingredient] | None = None,
    ) -> DishRecord:
        """Replace a dish's fields; recompute nutrition when ingredients change."""
        current = self.get_dish(dish_id)
        self._ensure_can_edit(session, current.restaurant_id)
        payload: dict[str, object] = _draft_payload(draft)
        if ingredients is not None:
            totals = await self._compute_totals(ingredients)
            payload.update(_nutrition_payload(totals))
            payload["ingredients"] = _ingredients_payload(ingredients)
        dish = self.repository.update_dish(dish_id, payload)
        _logger.info("Updated dish %s", dish_id)
        return dish

    def get_dish(self, dish_id: UUID) -> DishRecord:
        """Return a dish or raise ``NotFoundError``."""
        dish = self.repository.get_dish(dish_id)
        if dish is None:
            raise NotFoundError(f"Dish not found: {dish_id}")
        return dish

    def list_menu(self, restaurant_id: UUID) -> list[DishRecord]:
        """Return a restaurant's dishes ordered by name."""
        if self.repository.get_restaurant_owner(restaurant_id) is None:
            raise NotFoundError(f"Restaurant not found: {restaurant_id}")
        dishes = self.repository.list_dishes(restaurant_id)
        return sorted(dishes, key=lambda dish: dish.name.lower())

    def delete_dish(self, session: AuthSession, dish_id: UUID) -> None:
        """Delete a dish owned by the session's user."""
        current = self.get_dish(dish_id)
        self._ensure_can_edit(session, current.restaurant_id)
        self.repository.delete_dish(dish_id)
        _logger.info("Deleted dish %s", dish_id)

    async def _compute_totals(self, ingredients: list[Ingredient]) -> NutritionTotals:
        resolved = await self.nutrition_service.resolve_ingredients(ingredients)
        return aggregate(resolved)

    def _ensure_can_edit(self, session: AuthSession, restaurant_id: UUID) -> None:
        owner_id = self.repository.get_restaurant_owner(restaurant_id)
        if owner_id is None:
            raise NotFoundError(f"Restaurant not found: {restaurant_id}")
        if session.is_admin:
            return
        if not session.can_manage_listings:
            raise PermissionDeniedError("Only verified users can manage dishes")
        if owner_id != session.user_id:
            raise PermissionDeniedError(
                "You can only manage dishes of your own restaurants"
            )


def _draft_payload(draft: DishDraft) -> dict[str, object]:
    return {
        "name": draft.name,
        "description": draft.description,
        "price": draft.price,
        "image_url": draft.image_url,
        "is_available": draft.is_available,
        "allergens": list(draft.allergens),
    }


def _nutrition_payload(totals: NutritionTotals) -> dict[str, object]:
    return {
        "base_kcal": totals.calories,
        "base_protein_g": totals.protein_g,
        "base_carbs_g": totals.carbs_g,
        "base_fat_g": totals.fat_g,
        "base_fiber_g": totals.fiber_g,
        "base_sugar_g": totals.sugar_g,
    }


def _ingredients_payload(ingredients: list[Ingredient]) -> list[dict[str, object]]:
    return [asdict(_to_saved(ingredient)) for ingredient in ingredients]


def _to_saved(ingredient: Ingredient) -> SavedIngredient:
    return SavedIngredient(
        id=ingredient.id,
        name=ingredient.name,
        amount=ingredient.amount,
        unit=ingredient.unit,
        source_id=ingredient.source_id,
    )
