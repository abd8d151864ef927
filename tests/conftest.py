from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

import jvm_harvester.http as http_mod


@dataclass
class FakeResponse:
    text: str = ""
    payload: Any = None
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)

    def raise_for_status(self) -> None:
        return

    def json(self) -> Any:
        if self.payload is None:
            raise ValueError("response body is not JSON")
        return self.payload


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> SimpleNamespace:
    """Route ``jvm_harvester.http`` GETs to canned responses keyed by URL.

    A route may be a FakeResponse, an exception to raise, or a callable
    receiving ``(url, **kwargs)``. Unrouted URLs fail with ConnectError.
    """

    routes: dict[str, Any] = {}
    calls: list[tuple[str, dict[str, Any]]] = []

    def fake_get(url: str, **kwargs: Any) -> Any:
        calls.append((url, kwargs))
        target = routes.get(url)
        if target is None:
            raise httpx.ConnectError(f"no route for {url}")
        if isinstance(target, Exception):
            raise target
        if callable(target):
            return target(url, **kwargs)
        return target

    monkeypatch.setattr(http_mod, "_http_get", fake_get)
    return SimpleNamespace(routes=routes, calls=calls)
