"""Unit tests for the query result cache."""

import pytest

from recipesuggest.features.recipes.domain.models import CuisineType, RecipeFilters
from recipesuggest.shared.cache.query_cache import QueryCache, serialize_key


class TestSerializeKey:
    def test_dict_order_does_not_matter(self):
        assert serialize_key(("q", {"a": 1, "b": 2})) == serialize_key(("q", {"b": 2, "a": 1}))

    def test_equal_filters_share_a_key(self):
        a = RecipeFilters(cuisine=[CuisineType.KOREAN, CuisineType.JAPANESE])
        b = RecipeFilters(cuisine=["japanese", "korean", "korean"])
        assert serialize_key(("recipes", a)) == serialize_key(("recipes", b))

    def test_different_filters_differ(self):
        assert serialize_key(("recipes", RecipeFilters(is_vegan=True))) != serialize_key(("recipes", RecipeFilters()))


class TestQueryCache:
    @pytest.mark.asyncio
    async def test_get_or_fetch_fetches_once(self):
        cache = QueryCache()
        calls = []

        async def fetch():
            calls.append(1)
            return ["row"]

        assert await cache.get_or_fetch(("recipes", None), fetch) == ["row"]
        assert await cache.get_or_fetch(("recipes", None), fetch) == ["row"]
        assert len(calls) == 1

    def test_invalidate_by_prefix(self):
        cache = QueryCache()
        cache.set(("bookmark", "u1", "r1"), True)
        cache.set(("bookmark", "u1", "r2"), False)
        cache.set(("bookmarks", "u1"), [])

        assert cache.invalidate(("bookmark", "u1", "r1")) == 1
        assert ("bookmark", "u1", "r2") in cache
        assert cache.invalidate(("bookmark",)) == 1
        assert ("bookmarks", "u1") in cache

    def test_prefix_matches_whole_elements_only(self):
        cache = QueryCache()
        cache.set(("recipes", RecipeFilters()), [])
        cache.set(("recipe", "r1"), None)

        cache.invalidate(("recipes",))

        assert ("recipe", "r1") in cache
        assert len(cache) == 1

    def test_clear(self):
        cache = QueryCache()
        cache.set(("a",), 1)
        cache.clear()
        assert cache.get(("a",)) is None
