"""
Shared fixtures: a scripted fake backend behind httpx.MockTransport, signed
session tokens and an API client wired to both.
"""

import json
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import jwt
import pytest

from admin_console.api_client import AdminApiClient
from admin_console.notifications import InAppNotifier
from admin_console.session import StaticSessionProvider

BASE_URL = "http://backend.test"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def make_token(admin_id: str = "ADM001", name: str = "Asha Admin",
               expires_in: Optional[int] = 3600, **claims: Any) -> str:
    """Signed HS256 token; the console never checks the signature"""
    payload: Dict[str, Any] = {"admin_id": admin_id, "name": name, **claims}
    if expires_in is not None:
        payload["exp"] = int(time.time()) + expires_in
    return jwt.encode(payload, "console-test-secret-key-0123456789abcdef", algorithm="HS256")


class FakeBackend:
    """Route table keyed by (method, path); records every request it sees"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = httpx.Response(status, json=body if body is not None else {})

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        if callable(route):
            return route(request)
        return route

    def sent(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    def body_of(self, request: httpx.Request) -> Any:
        return json.loads(request.content)


def client_for(backend: FakeBackend, token: Optional[str]) -> AdminApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    return AdminApiClient(BASE_URL, StaticSessionProvider(token), client=http)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def token():
    return make_token()


@pytest.fixture
def api(backend, token):
    return client_for(backend, token)


@pytest.fixture
def notifier():
    return InAppNotifier()
