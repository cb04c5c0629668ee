"""Shared fixtures: an in-memory backend behind httpx.MockTransport."""

import json
from typing import Any, Callable, Union

import httpx
import pytest
import pytest_asyncio

from tiketflow import AsyncTiketFlow

BASE_URL = "http://tiket.test/api"

Route = Union[tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Routes ``(method, path)`` to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[(method, f"/api/{path.lstrip('/')}")] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def bodies(self, method: str, path: str) -> list[Any]:
        full = f"/api/{path.lstrip('/')}"
        return [
            json.loads(r.content) if r.content else None
            for r in self.requests
            if r.method == method and r.url.path == full
        ]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def client(backend: FakeBackend):
    c = AsyncTiketFlow(base_url=BASE_URL, token="t0k3n", transport=httpx.MockTransport(backend.handler))
    yield c
    await c.close()
