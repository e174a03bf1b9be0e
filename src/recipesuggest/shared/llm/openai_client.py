from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from recipesuggest.shared.config.settings import Settings, get_settings
from recipesuggest.shared.errors import (
    Misconfigured,
    QuotaExceeded,
    RateLimited,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnreachable,
)

log = logging.getLogger("llm")


def _chat_url(cfg: Settings) -> str:
    return f"{cfg.AI_GATEWAY_BASE_URL.rstrip('/')}/chat/completions"


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _raise_for_upstream_status(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    log.error(f"AI gateway error: {resp.status_code} {resp.text[:500]}")
    if resp.status_code == 429:
        raise RateLimited(f"AI gateway rate limited: {resp.status_code}")
    if resp.status_code == 402:
        raise QuotaExceeded(f"AI gateway quota exceeded: {resp.status_code}")
    raise UpstreamError(resp.status_code)


async def _post(
    client: httpx.AsyncClient,
    url: str,
    headers: Dict[str, str],
    payload: Dict[str, Any],
    deadline: float,
) -> httpx.Response:
    # httpx timeouts apply per network operation; the deadline bounds the whole exchange.
    try:
        return await asyncio.wait_for(client.post(url, headers=headers, json=payload), timeout=deadline)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        log.error(f"AI gateway timed out after {deadline}s: {e!r}")
        raise UpstreamTimeout(f"no complete response within {deadline}s") from e
    except httpx.TransportError as e:
        log.error(f"AI gateway unreachable: {e!r}")
        raise UpstreamUnreachable(str(e)) from e


async def complete_chat(
    messages: List[Dict[str, str]],
    *,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    request_timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Send one non-streaming chat completion request and return the assistant text.

    The API key is read from the environment on every call. Non-success statuses and
    transport failures are raised as typed suggestion errors; nothing is retried.
    The whole exchange, body included, must finish within the request deadline.
    An empty string is returned when the completion carries no content.
    """
    cfg = get_settings()
    if not cfg.AI_GATEWAY_API_KEY:
        raise Misconfigured("AI_GATEWAY_API_KEY is not configured")

    payload = {
        "model": (model or cfg.SUGGESTION_MODEL),
        "messages": messages,
        "temperature": temperature if temperature is not None else cfg.TEMPERATURE,
    }
    headers = _headers(cfg.AI_GATEWAY_API_KEY)
    url = _chat_url(cfg)

    deadline = request_timeout or cfg.LLM_REQUEST_TIMEOUT
    if client is None:
        async with httpx.AsyncClient(timeout=httpx.Timeout(deadline)) as owned:
            resp = await _post(owned, url, headers, payload, deadline)
    else:
        resp = await _post(client, url, headers, payload, deadline)

    _raise_for_upstream_status(resp)

    try:
        data = resp.json()
    except ValueError:
        log.error(f"AI gateway returned a non-JSON body: {resp.text[:500]}")
        return ""
    try:
        content = data["choices"][0]["message"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""
    return content if isinstance(content, str) else ""
