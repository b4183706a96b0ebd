"""Domain models for restaurant dishes."""

from dataclasses import dataclass, field
from uuid import UUID

from dish_nutrition.domain.nutrition import NutritionTotals


@dataclass(frozen=True)
class SavedIngredient:
    """Ingredient as stored with a dish, without its nutrition profile."""

    id: str
    name: str
    amount: float
    unit: str
    source_id: int | None = None


@dataclass(frozen=True)
class DishDraft:
    """Editable dish fields submitted by an owner."""

    name: str
    price: float
    description: str | None = None
    image_url: str | None = None
    is_available: bool = True
    allergens: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DishRecord:
    """Dish row with its nutrition snapshot."""

    id: UUID
    restaurant_id: UUID
    name: str
    description: str | None
    price: float
    image_url: str | None
    is_available: bool
    allergens: list[str]
    nutrition: NutritionTotals
    ingredients: list[SavedIngredient]
