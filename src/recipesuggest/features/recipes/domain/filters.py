from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from recipesuggest.features.recipes.domain.models import Recipe, RecipeFilters

# (column, query builder method, value) e.g. ("cuisine", "in_", ["korean", "japanese"])
Filter = Tuple[str, str, Any]

_DIETARY_FLAGS = ("is_vegetarian", "is_vegan", "is_halal", "is_gluten_free")


def build_recipe_query(filters: Optional[RecipeFilters], *, approved_only: bool = True) -> List[Filter]:
    """Translate recipe filters into triples for the store query builder."""
    out: List[Filter] = []
    if approved_only:
        out.append(("is_approved", "eq", True))
    if filters is None:
        return out

    if filters.cuisine:
        out.append(("cuisine", "in_", [c.value for c in filters.cuisine]))
    if filters.meal_type:
        out.append(("meal_type", "in_", [m.value for m in filters.meal_type]))
    if filters.spice_level:
        out.append(("spice_level", "in_", [s.value for s in filters.spice_level]))
    for flag in _DIETARY_FLAGS:
        if getattr(filters, flag):
            out.append((flag, "eq", True))
    if filters.search_query:
        out.append(("title", "ilike", f"%{filters.search_query}%"))
    return out


def matches(recipe: Recipe, filters: Optional[RecipeFilters]) -> bool:
    """Same predicate as ``build_recipe_query``, for lists already in memory."""
    if filters is None:
        return True
    if filters.cuisine and recipe.cuisine not in filters.cuisine:
        return False
    if filters.meal_type and recipe.meal_type not in filters.meal_type:
        return False
    if filters.spice_level and recipe.spice_level not in filters.spice_level:
        return False
    for flag in _DIETARY_FLAGS:
        if getattr(filters, flag) and not getattr(recipe, flag):
            return False
    if filters.search_query and filters.search_query.lower() not in recipe.title.lower():
        return False
    return True


def apply_filters(recipes: Iterable[Recipe], filters: Optional[RecipeFilters]) -> List[Recipe]:
    return [r for r in recipes if matches(r, filters)]


def active_filter_count(filters: Optional[RecipeFilters]) -> int:
    if filters is None:
        return 0
    count = len(filters.cuisine) + len(filters.meal_type) + len(filters.spice_level)
    count += sum(1 for flag in _DIETARY_FLAGS if getattr(filters, flag))
    return count
