"""Pytest configuration and shared fixtures for sitescout tests."""

import inspect
import socket
from collections.abc import Callable
from typing import Any

import httpx
import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure logic tests with no I/O or network")
    config.addinivalue_line("markers", "integration: Service tests against a mocked HTTP transport")
    config.addinivalue_line(
        "markers",
        "e2e: End-to-end tests with live network or subprocesses",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Apply default markers to tests without explicit markers.

    Tests should use explicit markers (@pytest.mark.unit, @pytest.mark.e2e).
    Unmarked tests default to unit.
    """
    for item in items:
        # Skip if already has a category marker
        markers = list(item.iter_markers())
        marker_names = [m.name for m in markers]
        if any(m in marker_names for m in ("unit", "integration", "e2e")):
            continue

        # Default unmarked tests to unit
        item.add_marker(pytest.mark.unit)


class FakeSite:
    """
    In-memory website served through httpx.MockTransport.

    Routes are keyed by ``scheme://host/path`` (query ignored) and apply to
    every method. Unknown routes answer 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], Any]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def add(
        self,
        url: str,
        body: str | bytes = "",
        *,
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        content = body.encode("utf-8") if isinstance(body, str) else body
        self.routes[url] = lambda request: httpx.Response(
            status, headers={"content-type": content_type}, content=content
        )

    def redirect(self, url: str, location: str, status: int = 301) -> None:
        self.routes[url] = lambda request: httpx.Response(status, headers={"location": location})

    def handle(self, url: str, handler: Callable[[httpx.Request], Any]) -> None:
        """Route to a custom (sync or async) handler."""
        self.routes[url] = handler

    def requested(self, url: str) -> int:
        """Count requests made to a route."""
        return sum(1 for request in self.requests if _route_key(request) == url)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(_route_key(request))
        if handler is None:
            return httpx.Response(404, text="not found")
        response = handler(request)
        if inspect.isawaitable(response):
            response = await response
        return response


def _route_key(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


@pytest.fixture
def site() -> FakeSite:
    """Empty fake website; add routes in the test."""
    return FakeSite()


@pytest.fixture
def fake_dns(monkeypatch: pytest.MonkeyPatch) -> dict[str, list[str]]:
    """
    Replace DNS resolution with a mapping of host to addresses.

    Hosts not in the mapping fail to resolve. ``example.com`` and
    ``www.example.com`` resolve to a public address by default.
    """
    records: dict[str, list[str]] = {
        "example.com": ["93.184.216.34"],
        "www.example.com": ["93.184.216.34"],
    }

    def getaddrinfo(host, port, family=0, type=0, proto=0, flags=0):
        addresses = records.get(host)
        if not addresses:
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        results = []
        for address in addresses:
            if ":" in address:
                results.append((socket.AF_INET6, socket.SOCK_STREAM, 6, "", (address, 0, 0, 0)))
            else:
                results.append((socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 0)))
        return results

    monkeypatch.setattr(socket, "getaddrinfo", getaddrinfo)
    return records
