"""
Shared fixtures: settings and in-memory fakes of the Neutron API and the
lending service, served through httpx.MockTransport.
"""

import json
from typing import Any, Callable

import httpx
import pytest

from neutron_mcp.config import NeutronSettings
from neutron_mcp.session import AUTH_PATH

API_KEY = "test-api-key"
API_SECRET = "test-api-secret"
API_URL = "https://api.neutron.test"
LENDING_URL = "http://lending.test"


def json_body(request: httpx.Request) -> Any:
    """Decode the JSON body a client sent."""
    return json.loads(request.content) if request.content else None


class FakeAPI:
    """
    Records requests and replays canned responses keyed by (method, path).

    Each route is a callable building the response for one request.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Any] = {}

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status_code: int = 200,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> None:
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if json is None:
                    return httpx.Response(status_code)
                return httpx.Response(status_code, json=json)

        self.routes[(method, path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": f"No route for {request.method} {request.url.path}"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


class FakeNeutronAPI(FakeAPI):
    """Fake Neutron API that accepts the token-signature handshake."""

    def __init__(self, account_id: str = "acc_123", access_token: str = "tok_abc") -> None:
        super().__init__()
        self.auth_response: dict[str, Any] = {
            "accountId": account_id,
            "accessToken": access_token,
            "expiredAt": "2099-01-01T00:00:00Z",
        }
        self.routes[("POST", AUTH_PATH)] = lambda request: httpx.Response(
            200, json=self.auth_response
        )

    @property
    def auth_calls(self) -> list[httpx.Request]:
        return self.calls("POST", AUTH_PATH)


@pytest.fixture
def settings() -> NeutronSettings:
    return NeutronSettings(
        api_key=API_KEY,
        api_secret=API_SECRET,
        api_url=API_URL,
        lending_url=LENDING_URL,
    )


@pytest.fixture
def neutron_api() -> FakeNeutronAPI:
    return FakeNeutronAPI()


@pytest.fixture
def lending_api() -> FakeAPI:
    return FakeAPI()
