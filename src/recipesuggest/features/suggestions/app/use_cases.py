from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from recipesuggest.features.suggestions.domain.extraction import extract_suggestions
from recipesuggest.features.suggestions.domain.prompts import build_messages
from recipesuggest.shared.errors import InvalidInput, MalformedSuggestion
from recipesuggest.shared.llm.openai_client import complete_chat

log = logging.getLogger("suggestions")


async def suggest_recipes(
    ingredients: Sequence[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """
    Turn an ingredient list into AI recipe suggestions.

    Validates the list, sends one chat completion request and extracts the JSON
    object from the answer. Each failure ends the request with a single typed error.
    """
    if not ingredients:
        raise InvalidInput("empty ingredient list")

    messages = build_messages(ingredients)
    log.info(f"Requesting suggestions for {len(ingredients)} ingredient(s)")
    text = await complete_chat(messages, client=client)

    try:
        result = extract_suggestions(text)
    except MalformedSuggestion as e:
        log.error(f"Failed to parse AI response ({e.detail}): {e.raw_text!r}")
        raise

    log.info(f"Received {len(result['recipes'])} suggested recipe(s)")
    return result
