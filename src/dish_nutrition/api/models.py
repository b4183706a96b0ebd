"""Pydantic request and response models for the HTTP API."""

from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from dish_nutrition.domain.dishes import DishDraft, DishRecord
from dish_nutrition.domain.nutrition import (
    FoodDetails,
    FoodSummary,
    Ingredient,
    NutritionProfile,
    NutritionTotals,
)
from dish_nutrition.domain.sessions import AuthSession, Role

MAX_AMOUNT = 1e6
MAX_PER_100G = 1e4


class NutritionProfileModel(BaseModel):
    """Per-100 g nutrient values."""

    calories: float = Field(ge=0, le=MAX_PER_100G, allow_inf_nan=False)
    protein_g: float = Field(ge=0, le=MAX_PER_100G, allow_inf_nan=False)
    carbs_g: float = Field(ge=0, le=MAX_PER_100G, allow_inf_nan=False)
    fat_g: float = Field(ge=0, le=MAX_PER_100G, allow_inf_nan=False)
    fiber_g: float | None = Field(
        default=None, ge=0, le=MAX_PER_100G, allow_inf_nan=False
    )
    sugar_g: float | None = Field(
        default=None, ge=0, le=MAX_PER_100G, allow_inf_nan=False
    )

    def to_domain(self) -> NutritionProfile:
        return NutritionProfile(**self.model_dump())

    @classmethod
    def from_domain(cls, profile: NutritionProfile) -> "NutritionProfileModel":
        return cls(**asdict(profile))


class NutritionTotalsModel(BaseModel):
    """Absolute nutrient amounts."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None

    @classmethod
    def from_domain(cls, totals: NutritionTotals) -> "NutritionTotalsModel":
        return cls(**asdict(totals))


class IngredientModel(BaseModel):
    """Ingredient payload; ``nutrition`` is the cached FDC profile, if any."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    amount: float = Field(gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    unit: str = "g"
    source_id: int | None = None
    nutrition: NutritionProfileModel | None = None

    def to_domain(self) -> Ingredient:
        return Ingredient(
            id=self.id,
            name=self.name,
            amount=self.amount,
            unit=self.unit,
            source_id=self.source_id,
            nutrition=self.nutrition.to_domain() if self.nutrition else None,
        )


class ScaleRequest(BaseModel):
    """Single-ingredient scaling request."""

    profile: NutritionProfileModel
    amount: float = Field(gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    unit: str = "g"


class ScaleResponse(BaseModel):
    """Single-ingredient scaling result."""

    grams: float
    totals: NutritionTotalsModel
    unit_recognized: bool


class AggregateRequest(BaseModel):
    """Dish-level aggregation request."""

    ingredients: list[IngredientModel] = Field(default_factory=list)
    resolve: bool = False


class AggregateResponse(BaseModel):
    """Dish-level totals with input diagnostics."""

    totals: NutritionTotalsModel
    unrecognized_units: list[str]
    unresolved_ingredient_ids: list[str]


class FoodSummaryModel(BaseModel):
    """FDC search hit."""

    fdc_id: int
    description: str
    brand_owner: str | None = None
    data_type: str | None = None

    @classmethod
    def from_domain(cls, food: FoodSummary) -> "FoodSummaryModel":
        return cls(**asdict(food))


class FoodDetailsModel(BaseModel):
    """FDC food with its per-100 g profile."""

    food: FoodSummaryModel
    profile: NutritionProfileModel
    serving_size_g: float | None = None

    @classmethod
    def from_domain(cls, details: FoodDetails) -> "FoodDetailsModel":
        return cls(
            food=FoodSummaryModel.from_domain(details.summary),
            profile=NutritionProfileModel.from_domain(details.profile),
            serving_size_g=details.serving_size_g,
        )


class DishRequest(BaseModel):
    """Create or update payload for a dish.

    On update, omitting ``ingredients`` keeps the stored nutrition snapshot.
    """

    name: str = Field(min_length=1, max_length=200)
    price: float = Field(ge=0)
    description: str | None = None
    image_url: str | None = None
    is_available: bool = True
    allergens: list[str] = Field(default_factory=list)
    ingredients: list[IngredientModel] | None = None

    def to_draft(self) -> DishDraft:
        return DishDraft(
            name=self.name.strip(),
            price=self.price,
            description=self.description,
            image_url=self.image_url,
            is_available=self.is_available,
            allergens=sorted(
                {allergen.strip() for allergen in self.allergens if allergen.strip()}
            ),
        )

    def domain_ingredients(self) -> list[Ingredient] | None:
        if self.ingredients is None:
            return None
        return [ingredient.to_domain() for ingredient in self.ingredients]


class SavedIngredientModel(BaseModel):
    """Ingredient as stored with a dish."""

    id: str
    name: str
    amount: float
    unit: str
    source_id: int | None = None


class DishResponse(BaseModel):
    """Dish with its nutrition snapshot."""

    id: UUID
    restaurant_id: UUID
    name: str
    description: str | None
    price: float
    image_url: str | None
    is_available: bool
    allergens: list[str]
    nutrition: NutritionTotalsModel
    ingredients: list[SavedIngredientModel]

    @classmethod
    def from_domain(cls, dish: DishRecord) -> "DishResponse":
        return cls(
            id=dish.id,
            restaurant_id=dish.restaurant_id,
            name=dish.name,
            description=dish.description,
            price=dish.price,
            image_url=dish.image_url,
            is_available=dish.is_available,
            allergens=dish.allergens,
            nutrition=NutritionTotalsModel.from_domain(dish.nutrition),
            ingredients=[
                SavedIngredientModel(**asdict(item)) for item in dish.ingredients
            ],
        )


class IssueSessionRequest(BaseModel):
    """Admin request to open a session for a user."""

    user_id: UUID
    role: Role = Role.USER


class SessionResponse(BaseModel):
    """Issued session token."""

    token: str
    user_id: UUID
    role: Role
    issued_at: datetime

    @classmethod
    def from_domain(cls, session: AuthSession) -> "SessionResponse":
        return cls(**asdict(session))
