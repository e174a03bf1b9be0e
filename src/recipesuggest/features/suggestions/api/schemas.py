from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SuggestionPayload(BaseModel):
    ingredients: List[str] = Field(min_length=1)


class SuggestedRecipe(BaseModel):
    """
    A single AI suggestion.

    Model output is loosely typed: fields may be missing, null, or numbers where
    text is expected. Scalars are read as text and null as empty.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = ""
    description: str = ""
    cuisine: str = ""
    cook_time: str = Field(default="", alias="cookTime")
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)

    @field_validator("name", "description", "cuisine", "cook_time", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float, bool)):
            return str(v)
        return v

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _as_text_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, (list, tuple)):
            return [str(item) if isinstance(item, (int, float, bool)) else item for item in v if item is not None]
        return v


class SuggestionResponse(BaseModel):
    recipes: List[SuggestedRecipe] = Field(default_factory=list)

    @field_validator("recipes", mode="before")
    @classmethod
    def _null_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ErrorBody(BaseModel):
    error: str
