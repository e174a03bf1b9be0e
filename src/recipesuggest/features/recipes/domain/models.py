"""Records for rows read from the backend store.

Rows are parsed here right after retrieval. List columns that come back as
something other than a list are defaulted to an empty list; rows that cannot be
parsed at all are dropped by ``parse_rows`` with a warning.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

log = logging.getLogger("store")

T = TypeVar("T", bound=BaseModel)


class CuisineType(str, Enum):
    MALAYSIAN = "malaysian"
    INDONESIAN = "indonesian"
    KOREAN = "korean"
    JAPANESE = "japanese"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH_DINNER = "lunch_dinner"
    SNACKS = "snacks"
    DESSERTS = "desserts"
    DRINKS = "drinks"


class SpiceLevel(str, Enum):
    NONE = "none"
    MILD = "mild"
    MEDIUM = "medium"
    SPICY = "spicy"
    VERY_SPICY = "very_spicy"


def _list_or_empty(v: Any) -> List[Any]:
    return v if isinstance(v, list) else []


class Recipe(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    cuisine: CuisineType
    meal_type: MealType
    spice_level: SpiceLevel
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: int = Field(1, ge=1)
    calories: Optional[int] = Field(None, ge=0)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_halal: bool = False
    is_gluten_free: bool = False
    is_approved: bool = True
    created_at: str
    average_rating: Optional[float] = None
    review_count: Optional[int] = None

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def default_lists(cls, v: Any) -> List[Any]:
        return _list_or_empty(v)


class ReviewAuthor(BaseModel):
    username: str
    avatar_url: Optional[str] = None


class Review(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    recipe_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    created_at: str
    author: Optional[ReviewAuthor] = None

    @model_validator(mode="before")
    @classmethod
    def lift_profile(cls, data: Any) -> Any:
        """The joined ``profiles`` column becomes ``author``."""
        if isinstance(data, dict) and "profiles" in data and "author" not in data:
            data = dict(data)
            profile = data.pop("profiles")
            data["author"] = profile if isinstance(profile, dict) else None
        return data


class Bookmark(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    recipe_id: str
    created_at: str
    recipe: Optional[Recipe] = None

    @model_validator(mode="before")
    @classmethod
    def lift_recipe(cls, data: Any) -> Any:
        if isinstance(data, dict) and "recipes" in data and "recipe" not in data:
            data = dict(data)
            recipe = data.pop("recipes")
            data["recipe"] = recipe if isinstance(recipe, dict) else None
        return data


class AdminReviewRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    recipe_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    created_at: str
    recipe_title: str = ""
    username: str = ""

    @model_validator(mode="before")
    @classmethod
    def flatten_joins(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            recipe = data.pop("recipes", None)
            profile = data.pop("profiles", None)
            if isinstance(recipe, dict):
                data.setdefault("recipe_title", recipe.get("title") or "")
            if isinstance(profile, dict):
                data.setdefault("username", profile.get("username") or "")
        return data


class AdminUserRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: str
    roles: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def flatten_roles(cls, data: Any) -> Any:
        if isinstance(data, dict) and "user_roles" in data:
            data = dict(data)
            roles = _list_or_empty(data.pop("user_roles"))
            data["roles"] = [r["role"] for r in roles if isinstance(r, dict) and r.get("role")]
        return data

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


class RecipeFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cuisine: List[CuisineType] = Field(default_factory=list)
    meal_type: List[MealType] = Field(default_factory=list, alias="mealType")
    spice_level: List[SpiceLevel] = Field(default_factory=list, alias="spiceLevel")
    is_vegetarian: bool = Field(False, alias="isVegetarian")
    is_vegan: bool = Field(False, alias="isVegan")
    is_halal: bool = Field(False, alias="isHalal")
    is_gluten_free: bool = Field(False, alias="isGlutenFree")
    search_query: Optional[str] = Field(None, alias="searchQuery")

    @field_validator("cuisine", "meal_type", "spice_level", mode="after")
    @classmethod
    def dedupe_sorted(cls, v: List[Enum]) -> List[Enum]:
        # Stable order keeps equal filter sets on one cache key.
        return sorted(set(v), key=lambda e: e.value)

    @field_validator("search_query", mode="after")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class RecipeInput(BaseModel):
    """Writable recipe fields used by the admin console."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    cuisine: CuisineType
    meal_type: MealType
    spice_level: SpiceLevel
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: int = Field(1, ge=1)
    calories: Optional[int] = Field(None, ge=0)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_halal: bool = False
    is_gluten_free: bool = False
    is_approved: bool = True

    @field_validator("ingredients", "instructions", mode="after")
    @classmethod
    def drop_blank_lines(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]


def parse_rows(model: Type[T], rows: Iterable[Dict[str, Any]]) -> List[T]:
    out: List[T] = []
    for row in rows or []:
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id") if isinstance(row, dict) else None
            log.warning(f"Dropping {model.__name__} row id={row_id}: {e.error_count()} validation error(s)")
    return out
