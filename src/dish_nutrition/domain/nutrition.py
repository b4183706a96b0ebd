"""Nutrition domain models."""

from dataclasses import dataclass
from enum import StrEnum


class Unit(StrEnum):
    """Measurement units accepted for ingredient amounts."""

    GRAM = "g"
    KILOGRAM = "kg"
    OUNCE = "oz"
    POUND = "lb"
    MILLILITER = "ml"
    LITER = "l"
    CUP = "cup"
    TABLESPOON = "tbsp"
    TEASPOON = "tsp"


@dataclass(frozen=True)
class NutritionProfile:
    """Nutrient values for a 100 g reference quantity."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None


@dataclass(frozen=True)
class NutritionTotals:
    """Absolute nutrient amounts for a concrete quantity of food."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None


@dataclass(frozen=True)
class Ingredient:
    """A named food quantity, optionally linked to an FDC nutrition profile."""

    id: str
    name: str
    amount: float
    unit: str
    source_id: int | None = None
    nutrition: NutritionProfile | None = None


@dataclass(frozen=True)
class FoodSummary:
    """Summary information about a food from FDC."""

    fdc_id: int
    description: str
    brand_owner: str | None
    data_type: str | None


@dataclass(frozen=True)
class FoodDetails:
    """Full food details with a per-100 g profile."""

    summary: FoodSummary
    profile: NutritionProfile
    serving_size_g: float | None
