from __future__ import annotations

import logging

from jvm_harvester import http
from jvm_harvester.errors import FetchError
from jvm_harvester.providers.base import ProviderContext

logger = logging.getLogger(__name__)


def fetch_checksum(url: str, ctx: ProviderContext, algorithm: str = "sha256") -> str | None:
    """Read a sibling digest file (``<hex>  <filename>``) best-effort."""

    try:
        text = http.get_text(url, **ctx.http_kwargs())
    except FetchError as exc:
        logger.warning("[%s] unable to find %s at %s: %s", ctx.name, algorithm, url, exc)
        return None
    digest = next(iter(text.split()), None)
    return f"{algorithm}:{digest}" if digest else None


__all__ = ["fetch_checksum"]
