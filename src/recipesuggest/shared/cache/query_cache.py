from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Tuple

from pydantic import BaseModel

log = logging.getLogger("cache")

QueryKey = Tuple[Any, ...]


def _canonical(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return _canonical(value.model_dump(mode="json", exclude_none=True))
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(v) for v in value), key=lambda v: json.dumps(v, sort_keys=True, default=str))
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def serialize_key(key: QueryKey) -> str:
    return json.dumps(_canonical(list(key)), sort_keys=True, default=str, separators=(",", ":"))


class QueryCache:
    """
    Result cache keyed by query parameters.

    Keys are tuples whose first element names the query (``("recipes", filters)``).
    Mutations call ``invalidate`` with a key prefix to drop every affected entry.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[QueryKey, Any]] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return serialize_key(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: QueryKey, default: Any = None) -> Any:
        entry = self._entries.get(serialize_key(key))
        return entry[1] if entry is not None else default

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[serialize_key(key)] = (tuple(key), value)

    async def get_or_fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        skey = serialize_key(key)
        if skey in self._entries:
            return self._entries[skey][1]
        value = await fetcher()
        self._entries[skey] = (tuple(key), value)
        return value

    def invalidate(self, prefix: QueryKey) -> int:
        prefix_parts = _canonical(list(prefix))
        stale = [
            skey
            for skey, (key, _) in self._entries.items()
            if _canonical(list(key))[: len(prefix_parts)] == prefix_parts
        ]
        for skey in stale:
            del self._entries[skey]
        if stale:
            log.debug(f"Invalidated {len(stale)} cache entr{'y' if len(stale) == 1 else 'ies'} for {prefix!r}")
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
