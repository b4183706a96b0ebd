"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from dish_nutrition.api.admin import router as admin_router
from dish_nutrition.api.auth import require_session
from dish_nutrition.api.auth import router as auth_router
from dish_nutrition.api.models import (
    AggregateRequest,
    AggregateResponse,
    DishRequest,
    DishResponse,
    FoodDetailsModel,
    FoodSummaryModel,
    NutritionTotalsModel,
    ScaleRequest,
    ScaleResponse,
)
from dish_nutrition.app_logging import configure_logging
from dish_nutrition.containers import AppContainer
from dish_nutrition.domain.errors import (
    FoodLookupError,
    FoodLookupErrorKind,
    NotFoundError,
    PermissionDeniedError,
)
from dish_nutrition.domain.sessions import AuthSession
from dish_nutrition.services.calculator import (
    aggregate,
    is_known_unit,
    normalize_to_grams,
    scale_profile,
    unrecognized_units,
)

_LOOKUP_STATUS = {
    FoodLookupErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FoodLookupErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    FoodLookupErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Dish Nutrition", lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(auth_router)

    @app.exception_handler(FoodLookupError)
    async def food_lookup_error_handler(
        request: Request, exc: FoodLookupError
    ) -> JSONResponse:
        logger.warning(
            "Food lookup failed on %s: kind=%s %s", request.url.path, exc.kind, exc
        )
        return JSONResponse(
            status_code=_LOOKUP_STATUS.get(exc.kind, status.HTTP_502_BAD_GATEWAY),
            content={"detail": {"kind": exc.kind.value, "message": exc.message}},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(PermissionDeniedError)
    async def permission_denied_handler(
        request: Request, exc: PermissionDeniedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(
        request: Request,
        q: str = Query(min_length=1),
        limit: int = Query(default=10, ge=1, le=50),
    ) -> dict[str, list[FoodSummaryModel]]:
        """Search the food database."""
        state_container: AppContainer = request.app.state.container
        foods = await state_container.nutrition_service.search(q, limit=limit)
        return {"foods": [FoodSummaryModel.from_domain(food) for food in foods]}

    @app.get("/foods/{fdc_id}")
    async def get_food(fdc_id: int, request: Request) -> FoodDetailsModel:
        """Return a food's per-100 g nutrition profile."""
        state_container: AppContainer = request.app.state.container
        details = await state_container.nutrition_service.get_food(fdc_id)
        return FoodDetailsModel.from_domain(details)

    @app.post("/nutrition/scale")
    async def scale_ingredient(body: ScaleRequest) -> ScaleResponse:
        """Scale a per-100 g profile to one ingredient amount."""
        grams = normalize_to_grams(body.amount, body.unit)
        totals = scale_profile(body.profile.to_domain(), grams)
        return ScaleResponse(
            grams=grams,
            totals=NutritionTotalsModel.from_domain(totals),
            unit_recognized=is_known_unit(body.unit),
        )

    @app.post("/nutrition/aggregate")
    async def aggregate_ingredients(
        body: AggregateRequest, request: Request
    ) -> AggregateResponse:
        """Sum nutrition over an ingredient list."""
        state_container: AppContainer = request.app.state.container
        ingredients = [ingredient.to_domain() for ingredient in body.ingredients]
        if body.resolve:
            ingredients = await state_container.nutrition_service.resolve_ingredients(
                ingredients
            )
        return AggregateResponse(
            totals=NutritionTotalsModel.from_domain(aggregate(ingredients)),
            unrecognized_units=unrecognized_units(ingredients),
            unresolved_ingredient_ids=[
                ingredient.id
                for ingredient in ingredients
                if ingredient.nutrition is None
            ],
        )

    @app.get("/restaurants/{restaurant_id}/menu")
    async def restaurant_menu(
        restaurant_id: UUID, request: Request
    ) -> dict[str, list[DishResponse]]:
        """List a restaurant's dishes."""
        state_container: AppContainer = request.app.state.container
        dishes = state_container.dish_service.list_menu(restaurant_id)
        return {"dishes": [DishResponse.from_domain(dish) for dish in dishes]}

    @app.get("/dishes/{dish_id}")
    async def get_dish(dish_id: UUID, request: Request) -> DishResponse:
        """Return one dish."""
        state_container: AppContainer = request.app.state.container
        return DishResponse.from_domain(state_container.dish_service.get_dish(dish_id))

    @app.post(
        "/restaurants/{restaurant_id}/dishes", status_code=status.HTTP_201_CREATED
    )
    async def create_dish(
        restaurant_id: UUID,
        body: DishRequest,
        request: Request,
        session: AuthSession = Depends(require_session),
    ) -> DishResponse:
        """Create a dish and store its nutrition snapshot."""
        state_container: AppContainer = request.app.state.container
        dish = await state_container.dish_service.create_dish(
            session,
            restaurant_id,
            body.to_draft(),
            body.domain_ingredients() or [],
        )
        return DishResponse.from_domain(dish)

    @app.put("/dishes/{dish_id}")
    async def update_dish(
        dish_id: UUID,
        body: DishRequest,
        request: Request,
        session: AuthSession = Depends(require_session),
    ) -> DishResponse:
        """Update a dish; ingredients, when given, replace the stored list."""
        state_container: AppContainer = request.app.state.container
        dish = await state_container.dish_service.update_dish(
            session, dish_id, body.to_draft(), body.domain_ingredients()
        )
        return DishResponse.from_domain(dish)

    @app.delete("/dishes/{dish_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_dish(
        dish_id: UUID,
        request: Request,
        session: AuthSession = Depends(require_session),
    ) -> None:
        """Delete a dish."""
        state_container: AppContainer = request.app.state.container
        state_container.dish_service.delete_dish(session, dish_id)

    return app
