"""Supabase-backed dish repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from dish_nutrition.domain.dishes import DishRecord, SavedIngredient
from dish_nutrition.domain.nutrition import NutritionTotals
from dish_nutrition.services.dishes import DishRepository


@dataclass
class SupabaseDishRepository(DishRepository):
    """Supabase implementation for dishes and restaurant ownership."""

    client: Client

    def get_restaurant_owner(self, restaurant_id: UUID) -> UUID | None:
        """Return the owner of a restaurant, or None if it does not exist."""
        response = (
            self.client.table("restaurants")
            .select("id, owner_id")
            .eq("id", str(restaurant_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UUID(response.data[0]["owner_id"])

    def create_dish(
        self, restaurant_id: UUID, payload: dict[str, object]
    ) -> DishRecord:
        """Create a dish row and return it."""
        response = (
            self.client.table("dishes")
            .insert({"restaurant_id": str(restaurant_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create dish")
        return _parse_dish(response.data[0])

    def update_dish(self, dish_id: UUID, payload: dict[str, object]) -> DishRecord:
        """Update a dish row and return it."""
        response = (
            self.client.table("dishes")
            .update(payload)
            .eq("id", str(dish_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update dish")
        return _parse_dish(response.data[0])

    def get_dish(self, dish_id: UUID) -> DishRecord | None:
        """Return a dish by id, if present."""
        response = (
            self.client.table("dishes")
            .select("*")
            .eq("id", str(dish_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_dish(response.data[0])

    def list_dishes(self, restaurant_id: UUID) -> list[DishRecord]:
        """Return all dishes of a restaurant."""
        response = (
            self.client.table("dishes")
            .select("*")
            .eq("restaurant_id", str(restaurant_id))
            .order("name")
            .execute()
        )
        return [_parse_dish(row) for row in response.data or []]

    def delete_dish(self, dish_id: UUID) -> None:
        """Delete a dish row."""
        self.client.table("dishes").delete().eq("id", str(dish_id)).execute()


def _parse_dish(row: dict[str, object]) -> DishRecord:
    """Parse a dish row into a domain model."""
    return DishRecord(
        id=UUID(row["id"]),
        restaurant_id=UUID(row["restaurant_id"]),
        name=str(row.get("name", "")),
        description=row.get("description"),
        price=float(row.get("price") or 0.0),
        image_url=row.get("image_url"),
        is_available=bool(row.get("is_available", True)),
        allergens=[str(name) for name in row.get("allergens") or []],
        nutrition=NutritionTotals(
            calories=float(row.get("base_kcal") or 0.0),
            protein_g=float(row.get("base_protein_g") or 0.0),
            carbs_g=float(row.get("base_carbs_g") or 0.0),
            fat_g=float(row.get("base_fat_g") or 0.0),
            fiber_g=_optional_float(row.get("base_fiber_g")),
            sugar_g=_optional_float(row.get("base_sugar_g")),
        ),
        ingredients=[
            _parse_ingredient(item)
            for item in row.get("ingredients") or []
            if isinstance(item, dict)
        ],
    )


def _parse_ingredient(item: dict[str, object]) -> SavedIngredient:
    source_id = item.get("source_id")
    return SavedIngredient(
        id=str(item.get("id", "")),
        name=str(item.get("name", "")),
        amount=float(item.get("amount") or 0.0),
        unit=str(item.get("unit") or "g"),
        source_id=int(source_id) if isinstance(source_id, int | str) else None,
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None
