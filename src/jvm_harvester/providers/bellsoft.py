from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from jvm_harvester import http
from jvm_harvester.errors import FetchError, ParseFailure
from jvm_harvester.providers.base import ProviderContext

BELLSOFT_API_BASE = "https://api.bell-sw.com/v1"
BELLSOFT_FIELDS = (
    "architecture,downloadUrl,GA,os,bundleType,filename,packageType,size,sha1,version"
)


@dataclass(frozen=True)
class BellSoftRelease:
    """One entry of a BellSoft releases listing (Liberica and Liberica NIK)."""

    architecture: str
    bundle_type: str
    download_url: str
    filename: str
    ga: bool
    os: str
    package_type: str
    sha1: str
    size: int
    version: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], vendor: str) -> BellSoftRelease:
        filename = payload.get("filename")
        download_url = payload.get("downloadUrl")
        if not filename or not download_url:
            raise ParseFailure(
                "release entry without filename or downloadUrl",
                vendor,
                name=str(filename or ""),
            )
        try:
            return cls(
                architecture=str(payload.get("architecture") or ""),
                bundle_type=str(payload.get("bundleType") or ""),
                download_url=str(download_url),
                filename=str(filename),
                ga=bool(payload.get("GA")),
                os=str(payload.get("os") or ""),
                package_type=str(payload.get("packageType") or ""),
                sha1=str(payload.get("sha1") or ""),
                size=int(payload.get("size") or 0),
                version=str(payload.get("version") or ""),
            )
        except (TypeError, ValueError) as exc:
            raise ParseFailure(f"incomplete release entry: {exc}", vendor) from exc

    @property
    def checksum(self) -> str | None:
        return f"sha1:{self.sha1}" if self.sha1 else None

    @property
    def release_type(self) -> str:
        return "ga" if self.ga else "ea"


def fetch_releases(path: str, ctx: ProviderContext) -> list[dict[str, Any]]:
    url = f"{BELLSOFT_API_BASE}/{path}"
    payload = http.get_json(url, params={"fields": BELLSOFT_FIELDS}, **ctx.http_kwargs())
    if not isinstance(payload, list):
        raise FetchError(f"expected a release list from {url}", ctx.name, url=url)
    return [entry for entry in payload if isinstance(entry, dict)]


__all__ = ["BELLSOFT_API_BASE", "BellSoftRelease", "fetch_releases"]
