from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from supabase import AsyncClient

from recipesuggest.features.recipes.domain.models import CuisineType, MealType, Recipe, RecipeFilters, SpiceLevel
from recipesuggest.features.recipes.infra.repository import RecipeRepository, ReviewRepository
from recipesuggest.shared.cache.query_cache import QueryCache
from recipesuggest.shared.store.supabase_store import create_store_client
from .schemas import ReviewsResponse

router = APIRouter(tags=["recipes"])


async def get_store(request: Request) -> AsyncClient:
    # Public reads run with the publishable key, so one client serves every request.
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = await create_store_client()
        request.app.state.store = store
    return store


def get_query_cache() -> QueryCache:
    # Other writers change the store, so cached reads live for one request only.
    return QueryCache()


def get_recipe_repository(
    store: AsyncClient = Depends(get_store), cache: QueryCache = Depends(get_query_cache)
) -> RecipeRepository:
    return RecipeRepository(store, cache)


def get_review_repository(
    store: AsyncClient = Depends(get_store), cache: QueryCache = Depends(get_query_cache)
) -> ReviewRepository:
    return ReviewRepository(store, cache)


@router.get("/recipes", response_model=List[Recipe])
async def list_recipes(
    cuisine: List[CuisineType] = Query(default=[]),
    meal_type: List[MealType] = Query(default=[]),
    spice_level: List[SpiceLevel] = Query(default=[]),
    is_vegetarian: bool = False,
    is_vegan: bool = False,
    is_halal: bool = False,
    is_gluten_free: bool = False,
    q: Optional[str] = None,
    repo: RecipeRepository = Depends(get_recipe_repository),
):
    filters = RecipeFilters(
        cuisine=cuisine,
        meal_type=meal_type,
        spice_level=spice_level,
        is_vegetarian=is_vegetarian,
        is_vegan=is_vegan,
        is_halal=is_halal,
        is_gluten_free=is_gluten_free,
        search_query=q,
    )
    return await repo.list_recipes(filters)


@router.get("/recipes/{recipe_id}", response_model=Recipe)
async def get_recipe(recipe_id: str, repo: RecipeRepository = Depends(get_recipe_repository)):
    recipe = await repo.get_recipe(recipe_id)
    if recipe is None or not recipe.is_approved:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


@router.get("/recipes/{recipe_id}/reviews", response_model=ReviewsResponse)
async def list_reviews(recipe_id: str, repo: ReviewRepository = Depends(get_review_repository)):
    reviews = await repo.list_reviews(recipe_id)
    return ReviewsResponse(
        reviews=reviews,
        average_rating=ReviewRepository.average_rating(reviews),
        review_count=len(reviews),
    )
