from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from jvm_harvester.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_USER_AGENT = "jvm-harvester/0.1"

_http_get: Callable[..., httpx.Response] = httpx.get


def _get(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
    vendor: str | None = None,
) -> httpx.Response:
    logger.debug("GET %s", url)
    try:
        resp = _http_get(
            url,
            params=params,
            headers={"User-Agent": user_agent},
            timeout=timeout,
            follow_redirects=True,
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"unexpected status {exc.response.status_code} for {url}",
            vendor,
            url=url,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"request to {url} failed: {exc}", vendor, url=url) from exc
    return resp


def get_text(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
    vendor: str | None = None,
) -> str:
    return _get(url, timeout=timeout, user_agent=user_agent, vendor=vendor).text


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
    vendor: str | None = None,
) -> Any:
    resp = _get(
        url,
        params=params,
        timeout=timeout,
        user_agent=user_agent,
        vendor=vendor,
    )
    try:
        return resp.json()
    except ValueError as exc:
        raise FetchError(f"invalid JSON from {url}: {exc}", vendor, url=url) from exc


__all__ = ["DEFAULT_TIMEOUT_S", "DEFAULT_USER_AGENT", "get_json", "get_text"]
