from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from recipesuggest.shared.config.settings import get_settings
from recipesuggest.shared.errors import InvalidInput, SuggestionError
from recipesuggest.features.suggestions.app.use_cases import suggest_recipes
from .schemas import ErrorBody, SuggestionPayload, SuggestionResponse

router = APIRouter(tags=["suggestions"])
log = logging.getLogger("suggestions.api")


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    timeout = httpx.Timeout(get_settings().LLM_REQUEST_TIMEOUT)
    async with httpx.AsyncClient(timeout=timeout) as client:
        yield client


@router.options("/ai-recipe-suggest")
async def suggest_preflight():
    return Response(status_code=200)


@router.post(
    "/ai-recipe-suggest",
    response_model=SuggestionResponse,
    responses={
        400: {"model": ErrorBody},
        402: {"model": ErrorBody},
        429: {"model": ErrorBody},
        500: {"model": ErrorBody},
    },
)
async def create_suggestions(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidInput("request body is not JSON") from e
    try:
        payload = SuggestionPayload.model_validate(body)
    except ValidationError as e:
        raise InvalidInput(str(e)) from e

    try:
        result = await suggest_recipes(payload.ingredients, client=client)
    except SuggestionError:
        raise
    except Exception as e:
        log.exception("Unexpected error while suggesting recipes")
        raise SuggestionError(f"{type(e).__name__}: {e}") from e
    # Returned as-is; recipe entries are not re-validated.
    return JSONResponse(content=result)
