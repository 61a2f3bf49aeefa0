# tests/conftest.py
from __future__ import annotations

import httpx
import pytest

from wildbook.client import WildbookClient


class FakeWildbook:
    """Records requests and answers from a route table."""

    BASE_URL = "http://wildbook.test"
    USER = {"success": True, "username": "alice", "id": "user-1"}

    def __init__(self, routes: dict[tuple[str, str], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.routes = {
            ("POST", "/api/v3/login"): httpx.Response(
                200, json=self.USER, headers={"Set-Cookie": "JSESSIONID=abc123; Path=/"}
            ),
            ("POST", "/api/v3/logout"): httpx.Response(200, json={"success": True}),
            **(routes or {}),
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={})
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def client(self, base_url: str | None = None) -> WildbookClient:
        return WildbookClient(base_url or self.BASE_URL, transport=httpx.MockTransport(self))


@pytest.fixture
def fake_wildbook() -> type[FakeWildbook]:
    return FakeWildbook
