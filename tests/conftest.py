"""Shared fixtures for unit tests.

The upstream model is replaced by an ``httpx.MockTransport`` fake and the backend
store by an in-memory stand-in for the Supabase query builder, so no test touches
the network.
"""

import asyncio
import json
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

CANNED_RECIPES: Dict[str, Any] = {
    "recipes": [
        {
            "name": "Nasi Goreng Ayam",
            "description": "Indonesian fried rice with chicken",
            "cuisine": "Indonesian",
            "cookTime": "25 mins",
            "ingredients": ["chicken", "rice", "soy sauce", "shallots"],
            "instructions": ["Cook the chicken", "Add rice", "Season with soy sauce", "Serve"],
        },
        {
            "name": "Oyakodon",
            "description": "Japanese chicken and egg rice bowl",
            "cuisine": "Japanese",
            "cookTime": "20 mins",
            "ingredients": ["chicken", "rice", "soy sauce", "egg"],
            "instructions": ["Simmer chicken in sauce", "Add egg", "Pour over rice"],
        },
        {
            "name": "Dakgangjeong",
            "description": "Korean sweet crispy chicken",
            "cuisine": "Korean",
            "cookTime": "40 mins",
            "ingredients": ["chicken", "soy sauce", "rice syrup"],
            "instructions": ["Fry chicken", "Make glaze", "Toss and serve with rice"],
        },
    ]
}


def completion_body(content: Optional[str]) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TricklingStream(httpx.AsyncByteStream):
    """Response body that arrives a few bytes at a time, pausing between chunks."""

    def __init__(self, data: bytes, *, delay: float, chunk_size: int = 8) -> None:
        self.chunks = [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]
        self.delay = delay

    async def __aiter__(self):
        for chunk in self.chunks:
            await asyncio.sleep(self.delay)
            yield chunk


class FakeUpstream:
    """Records every request and answers with a fixed response or exception."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        content: Optional[str] = None,
        body: Any = None,
        raises: Optional[Callable[[httpx.Request], Exception]] = None,
        trickle: Optional[float] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.body = body
        self.raises = raises
        self.trickle = trickle
        self.requests: List[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises(request)
        if self.trickle is not None:
            data = json.dumps(self.body if self.body is not None else completion_body(self.content)).encode()
            return httpx.Response(self.status_code, stream=TricklingStream(data, delay=self.trickle))
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream says no")
        return httpx.Response(200, json=completion_body(self.content))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def gateway_env(monkeypatch):
    monkeypatch.delenv("LOVABLE_API_KEY", raising=False)
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-gateway-key")
    monkeypatch.setenv("AI_GATEWAY_BASE_URL", "https://gateway.test/v1")
    monkeypatch.setenv("SUGGESTION_MODEL", "test/model")


@pytest.fixture
def canned_recipes() -> Dict[str, Any]:
    return json.loads(json.dumps(CANNED_RECIPES))


@pytest.fixture
def make_upstream() -> Callable[..., FakeUpstream]:
    return FakeUpstream


@pytest.fixture
def trickling_stream() -> Callable[..., TricklingStream]:
    return TricklingStream


_VERBS = ("select", "insert", "upsert", "update", "delete", "rpc")


class FakeQuery:
    """Records builder calls such as ``select``, ``eq`` and ``order`` until ``execute``."""

    def __init__(self, store: "FakeSupabase", target: str) -> None:
        self.store = store
        self.target = target
        self.calls: List[Tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str) -> Callable[..., "FakeQuery"]:
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args, **kwargs) -> "FakeQuery":
            self.calls.append((name, args, kwargs))
            return self

        return record

    @property
    def verb(self) -> str:
        return next((name for name, _, _ in self.calls if name in _VERBS), "select")

    def called(self, name: str, *args) -> bool:
        return any(n == name and a == args for n, a, _ in self.calls)

    def kwargs_of(self, name: str) -> dict:
        return next(kw for n, _, kw in self.calls if n == name)

    def payload(self) -> Any:
        return next(a[0] for n, a, _ in self.calls if n in ("insert", "upsert", "update"))

    async def execute(self) -> SimpleNamespace:
        self.store.executed.append(self)
        answer = self.store.routes.get((self.target, self.verb), [])
        if callable(answer):
            answer = answer(self)
        if isinstance(answer, Exception):
            raise answer
        return SimpleNamespace(data=answer)


class FakeSupabase:
    """
    Stand-in for ``supabase.AsyncClient``.

    ``routes`` maps ``(table or rpc name, verb)`` to the rows to return, an
    exception to raise, or a callable receiving the query.
    """

    def __init__(self, routes: Optional[Dict[Tuple[str, str], Any]] = None) -> None:
        self.routes = routes or {}
        self.executed: List[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, fn: str, params: Optional[Dict[str, Any]] = None) -> FakeQuery:
        query = FakeQuery(self, fn)
        query.calls.append(("rpc", (fn, params), {}))
        return query


@pytest.fixture
def fake_store() -> Callable[..., FakeSupabase]:
    return FakeSupabase
