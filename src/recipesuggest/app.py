from __future__ import annotations

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipesuggest.shared.config.settings import settings
from recipesuggest.shared.errors import StoreError, SuggestionError
from recipesuggest.shared.logging.logger import setup_logging

from recipesuggest.shared.api.health import router as health_router
from recipesuggest.features.recipes.api.routes import router as recipes_router
from recipesuggest.features.suggestions.api.routes import router as suggestions_router

log = logging.getLogger("app")


def _split(value: str) -> list[str]:
    if not value or value == "*":
        return ["*"]
    return [v.strip() for v in value.split(",") if v.strip()]


async def _suggestion_error_handler(request: Request, exc: SuggestionError) -> JSONResponse:
    log.warning(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    log.warning(f"{request.method} {request.url.path} -> store error {exc.code}: {exc.message}")
    return JSONResponse(status_code=502, content={"error": "Recipe store is unavailable"})


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="recipesuggest", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_split(settings.CORS_ALLOW_ORIGINS),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=_split(settings.CORS_ALLOW_METHODS),
        allow_headers=_split(settings.CORS_ALLOW_HEADERS),
    )

    app.add_exception_handler(SuggestionError, _suggestion_error_handler)
    app.add_exception_handler(StoreError, _store_error_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(suggestions_router, prefix="/v1")
    app.include_router(recipes_router, prefix="/v1")

    return app

# Uvicorn/Gunicorn entry point
app = create_app()
