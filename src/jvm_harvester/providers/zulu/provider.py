from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from jvm_harvester import http
from jvm_harvester.canonicalizer import (
    normalize_architecture,
    normalize_os,
    normalize_version,
)
from jvm_harvester.errors import FetchError, ParseFailure
from jvm_harvester.models import JvmRecord
from jvm_harvester.providers.base import ProviderContext, VendorPlugin

from .local_constants import (
    ZULU_API_URL,
    ZULU_INCLUDE_FIELDS,
    ZULU_MAX_PAGES,
    ZULU_PAGE_SIZE,
    ZULU_PROVIDER_ID,
)

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(
    r"^zulu(?P<distro>\d[0-9.]*)-(?P<release>ca|ea|sa)(?P<fx>-fx)?(?P<crac>-crac)?"
    r"-(?P<image>jdk|jre)(?P<java>\d[0-9.+]*)"
    r"-(?P<os>linux|macosx|macos|win|solaris)_(?P<musl>musl_)?"
    r"(?P<arch>aarch64|aarch32hf|aarch32sf|amd64|arm64|i686|ppc64le|ppc64|sparcv9|x64|x86)"
    r"\.(?P<ext>deb|dmg|msi|pkg|rpm|tar\.gz|zip)$"
)


@dataclass(frozen=True)
class FileNameMeta:
    arch: str
    distro_version: str
    ext: str
    features: tuple[str, ...]
    image_type: str
    java_version: str
    os: str
    release_type: str


def meta_from_name(name: str) -> FileNameMeta:
    logger.debug("[zulu] parsing name: %s", name)
    match = _NAME_PATTERN.match(name)
    if match is None:
        raise ParseFailure(
            f"regular expression did not match name: {name}",
            ZULU_PROVIDER_ID,
            name=name,
        )
    features: list[str] = []
    if match["fx"]:
        features.append("javafx")
    if match["crac"]:
        features.append("crac")
    if match["musl"]:
        features.append("musl")
    return FileNameMeta(
        arch=match["arch"],
        distro_version=match["distro"],
        ext=match["ext"],
        features=tuple(features),
        image_type=match["image"],
        java_version=match["java"],
        os=match["os"],
        release_type="ga" if match["release"] == "ca" else "ea",
    )


def map_release(package: Mapping[str, Any]) -> JvmRecord:
    name = str(package.get("name") or "")
    url = str(package.get("download_url") or "")
    if not name or not url:
        raise ParseFailure("package without name or download_url", ZULU_PROVIDER_ID, name=name)
    meta = meta_from_name(name)
    features = list(meta.features)
    if package.get("javafx_bundled"):
        features.append("javafx")
    if package.get("crac_supported"):
        features.append("crac")
    if package.get("lib_c_type") == "musl":
        features.append("musl")
    sha256 = package.get("sha256_hash")
    size = package.get("size")
    return JvmRecord(
        architecture=normalize_architecture(meta.arch),
        checksum=f"sha256:{sha256}" if sha256 else None,
        features=tuple(features),
        file_type=meta.ext,
        filename=name,
        image_type=meta.image_type,
        java_version=normalize_version(meta.java_version),
        jvm_impl="hotspot",
        os=normalize_os(meta.os),
        release_type=meta.release_type,
        size=int(size) if size else None,
        url=url,
        vendor=ZULU_PROVIDER_ID,
        version=normalize_version(meta.distro_version),
    )


def iter_packages(ctx: ProviderContext) -> Iterator[dict[str, Any]]:
    for page in range(1, ZULU_MAX_PAGES + 1):
        params = {
            "availability_types": "CA",
            "release_status": "both",
            "page_size": ZULU_PAGE_SIZE,
            "include_fields": ZULU_INCLUDE_FIELDS,
            "page": page,
        }
        payload = http.get_json(ZULU_API_URL, params=params, **ctx.http_kwargs())
        if not isinstance(payload, list):
            raise FetchError(
                f"expected a package list on page {page}",
                ZULU_PROVIDER_ID,
                url=ZULU_API_URL,
            )
        for package in payload:
            if isinstance(package, dict):
                yield package
        if len(payload) < ZULU_PAGE_SIZE:
            return
    logger.warning(
        "[zulu] stopped after %d full pages; later packages were not fetched",
        ZULU_MAX_PAGES,
    )


class ZuluProvider(VendorPlugin):
    name = ZULU_PROVIDER_ID

    def fetch(self, ctx: ProviderContext) -> set[JvmRecord]:
        records: set[JvmRecord] = set()
        for package in iter_packages(ctx):
            try:
                records.add(map_release(package))
            except ParseFailure as exc:
                logger.warning("%s", exc)
        return records


__all__ = [
    "FileNameMeta",
    "ZuluProvider",
    "iter_packages",
    "map_release",
    "meta_from_name",
]
