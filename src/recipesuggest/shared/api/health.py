from __future__ import annotations
import time
from fastapi import APIRouter

from recipesuggest.shared.config.settings import get_settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {
        "ok": True,
        "ts": time.time(),
        "llm_configured": bool(get_settings().AI_GATEWAY_API_KEY),
    }
