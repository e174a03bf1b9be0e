"""
Client side of the suggestion feature.

``IngredientComposer`` holds the ingredient set a user is building and the last
successful suggestion list. ``SuggestionClient`` performs the single HTTP call to
the suggestion endpoint and turns error responses back into typed errors.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from recipesuggest.features.suggestions.api.schemas import SuggestedRecipe, SuggestionResponse
from recipesuggest.shared.config.settings import get_settings
from recipesuggest.shared.errors import (
    InvalidInput,
    MalformedSuggestion,
    QuotaExceeded,
    RateLimited,
    SuggestionError,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnreachable,
)

log = logging.getLogger("suggestions.client")

POPULAR_INGREDIENTS = ["chicken", "rice", "eggs", "onion", "garlic", "tofu", "noodles", "soy sauce"]

_STATUS_ERRORS = {
    400: InvalidInput,
    402: QuotaExceeded,
    429: RateLimited,
}


def normalize_ingredient(raw: str) -> str:
    return (raw or "").strip().lower()


class SuggestionClient:
    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        cfg = get_settings()
        self.endpoint_url = endpoint_url or cfg.SUGGEST_ENDPOINT_URL
        self.http_client = http_client
        self.timeout = timeout or cfg.LLM_REQUEST_TIMEOUT

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        try:
            if self.http_client is not None:
                request = self.http_client.post(self.endpoint_url, json=payload)
                return await asyncio.wait_for(request, timeout=self.timeout)
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                return await asyncio.wait_for(client.post(self.endpoint_url, json=payload), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeout(f"no complete response within {self.timeout}s") from e
        except httpx.TransportError as e:
            raise UpstreamUnreachable(str(e)) from e

    async def suggest(self, ingredients: List[str]) -> SuggestionResponse:
        """Send exactly one request; no retries."""
        resp = await self._post({"ingredients": list(ingredients)})

        if not resp.is_success:
            try:
                message = resp.json().get("error", "")
            except (ValueError, AttributeError):
                message = resp.text
            error_cls = _STATUS_ERRORS.get(resp.status_code)
            if error_cls is not None:
                raise error_cls(message or None)
            raise UpstreamError(resp.status_code, message or None)

        try:
            return SuggestionResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise MalformedSuggestion(resp.text, "suggestion response does not match the recipe shape") from e


class IngredientComposer:
    def __init__(self, client: Optional[SuggestionClient] = None) -> None:
        self.client = client or SuggestionClient()
        self.ingredients: List[str] = []
        self.suggestions: List[SuggestedRecipe] = []
        self.loading = False

    def add_ingredient(self, raw: str) -> bool:
        """Add a trimmed, lowercased ingredient. Returns False when nothing changed."""
        token = normalize_ingredient(raw)
        if not token or token in self.ingredients:
            return False
        self.ingredients.append(token)
        return True

    def remove_ingredient(self, token: str) -> bool:
        if token not in self.ingredients:
            return False
        self.ingredients.remove(token)
        return True

    def quick_add_options(self) -> List[str]:
        return [i for i in POPULAR_INGREDIENTS if i not in self.ingredients]

    def clear(self) -> None:
        self.ingredients = []

    async def request_suggestions(self) -> List[SuggestedRecipe]:
        """
        Ask the suggestion service for recipes built from the current ingredients.

        Raises InvalidInput without touching the network when no ingredient was added.
        On failure the error propagates and the previous suggestions are kept.
        """
        if not self.ingredients:
            raise InvalidInput("Please add at least one ingredient to get suggestions.")

        self.loading = True
        try:
            response = await self.client.suggest(self.ingredients)
        except SuggestionError as e:
            log.error(f"Error getting suggestions: {type(e).__name__}: {e.detail}")
            raise
        finally:
            self.loading = False

        self.suggestions = response.recipes
        return self.suggestions
