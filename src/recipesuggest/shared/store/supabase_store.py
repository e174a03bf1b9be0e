"""
Backend store access through the Supabase client.

Repositories build queries with the supabase-py builder and run them through
``run_query`` so PostgREST and transport failures surface as ``StoreError``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from recipesuggest.shared.config.settings import get_settings
from recipesuggest.shared.errors import StoreError

log = logging.getLogger("store")


async def create_store_client(access_token: Optional[str] = None) -> AsyncClient:
    """
    Build an async Supabase client for the configured project.

    With ``access_token`` the requests run as that signed-in user, so row-level
    policies apply to them; without it they run with the publishable key.
    """
    cfg = get_settings()
    if not cfg.STORE_URL or not cfg.STORE_ANON_KEY:
        raise StoreError("misconfigured", "STORE_URL and STORE_ANON_KEY must be set")

    options = AsyncClientOptions(postgrest_client_timeout=cfg.STORE_REQUEST_TIMEOUT)
    client = await acreate_client(cfg.STORE_URL, cfg.STORE_ANON_KEY, options=options)
    if access_token:
        client.postgrest.auth(access_token)
    return client


async def run_query(query: Any) -> Any:
    """Execute a table or rpc query and return its ``data``."""
    try:
        response = await query.execute()
    except APIError as e:
        log.error(f"Store rejected request: {e.code} {e.message}")
        raise StoreError(e.code or "unknown", e.message or str(e)) from e
    except httpx.HTTPError as e:
        log.error(f"Store unreachable: {e!r}")
        raise StoreError("unavailable", str(e)) from e
    return response.data
