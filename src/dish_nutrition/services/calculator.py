"""Ingredient nutrition calculator.

Profiles are expressed per 100 g. Amounts are first normalized to grams with
fixed conversion factors, then each profile field is scaled by grams / 100 and
summed across the ingredient list. Volume units assume a density of 1 g/ml.
"""

import math

from dish_nutrition.domain.nutrition import (
    Ingredient,
    NutritionProfile,
    NutritionTotals,
    Unit,
)

GRAMS_PER_UNIT: dict[str, float] = {
    Unit.GRAM: 1.0,
    Unit.KILOGRAM: 1000.0,
    Unit.OUNCE: 28.35,
    Unit.POUND: 453.592,
    Unit.MILLILITER: 1.0,
    Unit.LITER: 1000.0,
    Unit.CUP: 240.0,
    Unit.TABLESPOON: 15.0,
    Unit.TEASPOON: 5.0,
}

_REFERENCE_GRAMS = 100.0


def is_known_unit(unit: str) -> bool:
    """Return True when the unit has a conversion factor."""
    return _unit_key(unit) in GRAMS_PER_UNIT


def normalize_to_grams(amount: float, unit: str) -> float:
    """Convert an amount in the given unit to grams.

    Unrecognized units are treated as grams.
    """
    factor = GRAMS_PER_UNIT.get(_unit_key(unit), 1.0)
    return amount * factor


def scale_profile(profile: NutritionProfile, grams: float) -> NutritionTotals:
    """Scale a per-100 g profile to an absolute gram quantity."""
    multiplier = grams / _REFERENCE_GRAMS
    return NutritionTotals(
        calories=profile.calories * multiplier,
        protein_g=profile.protein_g * multiplier,
        carbs_g=profile.carbs_g * multiplier,
        fat_g=profile.fat_g * multiplier,
        fiber_g=_scale_optional(profile.fiber_g, multiplier),
        sugar_g=_scale_optional(profile.sugar_g, multiplier),
    )


def scale(profile: NutritionProfile, amount: float, unit: str) -> NutritionTotals:
    """Return totals for a single ingredient amount."""
    return scale_profile(profile, normalize_to_grams(amount, unit))


def aggregate(ingredients: list[Ingredient]) -> NutritionTotals:
    """Sum scaled nutrition over ingredients with a resolved profile.

    Ingredients without a profile are skipped. Missing fiber or sugar values
    count as zero. Sums use ``math.fsum`` so the result does not depend on the
    order of the list; totals past the float range come back as inf or nan.
    """
    portions = [
        scale(ingredient.nutrition, ingredient.amount, ingredient.unit)
        for ingredient in ingredients
        if ingredient.nutrition is not None
    ]
    return NutritionTotals(
        calories=_sum([portion.calories for portion in portions]),
        protein_g=_sum([portion.protein_g for portion in portions]),
        carbs_g=_sum([portion.carbs_g for portion in portions]),
        fat_g=_sum([portion.fat_g for portion in portions]),
        fiber_g=_sum([portion.fiber_g or 0.0 for portion in portions]),
        sugar_g=_sum([portion.sugar_g or 0.0 for portion in portions]),
    )


def unrecognized_units(ingredients: list[Ingredient]) -> list[str]:
    """Return distinct unit strings that fell back to grams, in input order."""
    seen: list[str] = []
    for ingredient in ingredients:
        if not is_known_unit(ingredient.unit) and ingredient.unit not in seen:
            seen.append(ingredient.unit)
    return seen


def _unit_key(unit: str) -> str:
    return unit.strip().lower()


def _sum(values: list[float]) -> float:
    try:
        return math.fsum(values)
    except (OverflowError, ValueError):
        return sum(sorted(values))


def _scale_optional(value: float | None, multiplier: float) -> float | None:
    if value is None:
        return None
    return value * multiplier
