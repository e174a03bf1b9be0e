from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from supabase import AsyncClient

from recipesuggest.features.recipes.domain.filters import Filter, build_recipe_query
from recipesuggest.features.recipes.domain.models import (
    AdminReviewRow,
    AdminUserRow,
    Bookmark,
    Recipe,
    RecipeFilters,
    RecipeInput,
    Review,
    parse_rows,
)
from recipesuggest.shared.cache.query_cache import QueryCache
from recipesuggest.shared.errors import NotAuthenticated, NotAuthorized, StoreError
from recipesuggest.shared.store.supabase_store import run_query

log = logging.getLogger("store")


def _where(query: Any, filters: Iterable[Filter]) -> Any:
    for column, method, value in filters:
        query = getattr(query, method)(column, value)
    return query


class RecipeRepository:
    def __init__(self, store: AsyncClient, cache: QueryCache) -> None:
        self.store = store
        self.cache = cache

    async def list_recipes(self, filters: Optional[RecipeFilters] = None) -> List[Recipe]:
        """Approved recipes matching ``filters``, newest first."""
        filters = filters or RecipeFilters()

        async def fetch() -> List[Recipe]:
            query = _where(self.store.table("recipes").select("*"), build_recipe_query(filters))
            rows = await run_query(query.order("created_at", desc=True))
            return parse_rows(Recipe, rows)

        return await self.cache.get_or_fetch(("recipes", filters), fetch)

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        if not recipe_id:
            return None

        async def fetch() -> Optional[Recipe]:
            rows = await run_query(self.store.table("recipes").select("*").eq("id", recipe_id).limit(1))
            parsed = parse_rows(Recipe, rows)
            return parsed[0] if parsed else None

        return await self.cache.get_or_fetch(("recipe", recipe_id), fetch)


class ReviewRepository:
    def __init__(self, store: AsyncClient, cache: QueryCache) -> None:
        self.store = store
        self.cache = cache

    async def list_reviews(self, recipe_id: str) -> List[Review]:
        if not recipe_id:
            return []

        async def fetch() -> List[Review]:
            query = (
                self.store.table("reviews")
                .select("*, profiles(username, avatar_url)")
                .eq("recipe_id", recipe_id)
                .order("created_at", desc=True)
            )
            return parse_rows(Review, await run_query(query))

        return await self.cache.get_or_fetch(("reviews", recipe_id), fetch)

    async def add_review(self, user_id: Optional[str], recipe_id: str, rating: int, comment: str = "") -> None:
        """One review per user and recipe; a second submission replaces the first."""
        if not user_id:
            raise NotAuthenticated()
        if not 1 <= rating <= 5:
            raise ValueError(f"rating must be between 1 and 5, got {rating}")

        row = {"recipe_id": recipe_id, "user_id": user_id, "rating": rating, "comment": comment or None}
        await run_query(self.store.table("reviews").upsert(row, on_conflict="recipe_id,user_id"))
        self.cache.invalidate(("reviews", recipe_id))

    @staticmethod
    def average_rating(reviews: Sequence[Review]) -> float:
        if not reviews:
            return 0.0
        return sum(r.rating for r in reviews) / len(reviews)


class BookmarkRepository:
    def __init__(self, store: AsyncClient, cache: QueryCache) -> None:
        self.store = store
        self.cache = cache

    async def list_bookmarks(self, user_id: Optional[str]) -> List[Bookmark]:
        if not user_id:
            return []

        async def fetch() -> List[Bookmark]:
            rows = await run_query(self.store.table("bookmarks").select("*, recipes(*)").eq("user_id", user_id))
            return parse_rows(Bookmark, rows)

        return await self.cache.get_or_fetch(("bookmarks", user_id), fetch)

    async def is_bookmarked(self, user_id: Optional[str], recipe_id: str) -> bool:
        if not user_id or not recipe_id:
            return False

        async def fetch() -> bool:
            query = (
                self.store.table("bookmarks")
                .select("id")
                .eq("user_id", user_id)
                .eq("recipe_id", recipe_id)
                .limit(1)
            )
            return bool(await run_query(query))

        return await self.cache.get_or_fetch(("bookmark", user_id, recipe_id), fetch)

    async def toggle_bookmark(self, user_id: Optional[str], recipe_id: str, is_bookmarked: bool) -> bool:
        """Remove or add the bookmark and return the new state."""
        if not user_id:
            raise NotAuthenticated()

        table = self.store.table("bookmarks")
        if is_bookmarked:
            await run_query(table.delete().eq("user_id", user_id).eq("recipe_id", recipe_id))
        else:
            await run_query(table.insert({"user_id": user_id, "recipe_id": recipe_id}))

        self.cache.invalidate(("bookmarks",))
        self.cache.invalidate(("bookmark", user_id, recipe_id))
        return not is_bookmarked


class AdminRepository:
    """Admin console reads and writes. Every call checks the admin role first."""

    def __init__(self, store: AsyncClient, cache: QueryCache) -> None:
        self.store = store
        self.cache = cache

    async def is_admin(self, user_id: Optional[str]) -> bool:
        """
        Whether ``user_id`` holds the admin role.

        A failed role lookup counts as "not admin" for this call only; it is not
        cached, so the next call asks the store again.
        """
        if not user_id:
            return False

        async def fetch() -> bool:
            result = await run_query(self.store.rpc("has_role", {"_user_id": user_id, "_role": "admin"}))
            return result is True

        try:
            return await self.cache.get_or_fetch(("isAdmin", user_id), fetch)
        except StoreError as e:
            log.error(f"Error checking admin status: {e}")
            return False

    async def _require_admin(self, user_id: Optional[str]) -> None:
        if not user_id:
            raise NotAuthenticated()
        if not await self.is_admin(user_id):
            raise NotAuthorized()

    async def all_recipes(self, user_id: Optional[str]) -> List[Recipe]:
        await self._require_admin(user_id)

        async def fetch() -> List[Recipe]:
            rows = await run_query(self.store.table("recipes").select("*").order("created_at", desc=True))
            return parse_rows(Recipe, rows)

        return await self.cache.get_or_fetch(("admin-recipes",), fetch)

    async def all_reviews(self, user_id: Optional[str]) -> List[AdminReviewRow]:
        await self._require_admin(user_id)

        async def fetch() -> List[AdminReviewRow]:
            query = (
                self.store.table("reviews")
                .select("*, recipes!inner(title), profiles!reviews_user_id_fkey(username)")
                .order("created_at", desc=True)
            )
            return parse_rows(AdminReviewRow, await run_query(query))

        return await self.cache.get_or_fetch(("admin-reviews",), fetch)

    async def all_users(self, user_id: Optional[str]) -> List[AdminUserRow]:
        await self._require_admin(user_id)

        async def fetch() -> List[AdminUserRow]:
            query = self.store.table("profiles").select("*, user_roles(role)").order("created_at", desc=True)
            return parse_rows(AdminUserRow, await run_query(query))

        return await self.cache.get_or_fetch(("admin-users",), fetch)

    def _invalidate_recipes(self, recipe_id: Optional[str] = None) -> None:
        self.cache.invalidate(("admin-recipes",))
        self.cache.invalidate(("recipes",))
        if recipe_id:
            self.cache.invalidate(("recipe", recipe_id))

    async def create_recipe(self, user_id: Optional[str], recipe: RecipeInput) -> Recipe:
        await self._require_admin(user_id)
        rows = await run_query(self.store.table("recipes").insert(recipe.model_dump(mode="json")))
        created = parse_rows(Recipe, rows)
        if not created:
            raise StoreError("empty", "insert returned no recipe row")
        self._invalidate_recipes()
        return created[0]

    async def update_recipe(self, user_id: Optional[str], recipe_id: str, recipe: RecipeInput) -> Recipe:
        await self._require_admin(user_id)
        query = self.store.table("recipes").update(recipe.model_dump(mode="json")).eq("id", recipe_id)
        updated = parse_rows(Recipe, await run_query(query))
        if not updated:
            raise StoreError("not_found", f"recipe {recipe_id} not found")
        self._invalidate_recipes(recipe_id)
        return updated[0]

    async def delete_recipe(self, user_id: Optional[str], recipe_id: str) -> None:
        await self._require_admin(user_id)
        await run_query(self.store.table("recipes").delete().eq("id", recipe_id))
        self._invalidate_recipes(recipe_id)

    async def delete_review(self, user_id: Optional[str], review_id: str) -> None:
        await self._require_admin(user_id)
        await run_query(self.store.table("reviews").delete().eq("id", review_id))
        self.cache.invalidate(("admin-reviews",))
        self.cache.invalidate(("reviews",))
