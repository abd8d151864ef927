from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from jvm_harvester import http
from jvm_harvester.canonicalizer import (
    normalize_architecture,
    normalize_os,
    normalize_version,
)
from jvm_harvester.errors import FetchError, ParseFailure
from jvm_harvester.models import JvmRecord
from jvm_harvester.providers.base import ProviderContext, VendorPlugin
from jvm_harvester.providers.checksum import fetch_checksum
from jvm_harvester.providers.html import (
    AnchorElement,
    anchors_from_doc,
    href_suffix_selector,
    parse_document,
)

from .local_constants import (
    MICROSOFT_CHECKSUM_SUFFIX,
    MICROSOFT_DOWNLOAD_PAGES,
    MICROSOFT_EXTENSIONS,
    MICROSOFT_PROVIDER_ID,
)

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(
    r"^microsoft-jdk-(?P<version>\d[0-9.+]*)-(?P<os>alpine|linux|macos|windows)"
    r"-(?P<arch>x64|aarch64)\.(?P<ext>deb|msi|pkg|rpm|tar\.gz|zip)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class FileNameMeta:
    arch: str
    ext: str
    os: str
    version: str


def meta_from_name(name: str) -> FileNameMeta:
    logger.debug("[microsoft] parsing name: %s", name)
    match = _NAME_PATTERN.match(name)
    if match is None:
        raise ParseFailure(
            f"regular expression did not match name: {name}",
            MICROSOFT_PROVIDER_ID,
            name=name,
        )
    return FileNameMeta(
        arch=match["arch"],
        ext=match["ext"].lower(),
        os=match["os"].lower(),
        version=match["version"],
    )


def map_release(anchor: AnchorElement, ctx: ProviderContext) -> JvmRecord:
    name = anchor.name.rsplit("/", 1)[-1]
    meta = meta_from_name(name)
    checksum_url: str | None = f"{anchor.href}{MICROSOFT_CHECKSUM_SUFFIX}"
    checksum = fetch_checksum(checksum_url, ctx)
    if checksum is None:
        checksum_url = None
    version = normalize_version(meta.version)
    return JvmRecord(
        architecture=normalize_architecture(meta.arch),
        checksum=checksum,
        checksum_url=checksum_url,
        features=("musl",) if meta.os == "alpine" else None,
        file_type=meta.ext,
        filename=name,
        image_type="jdk",
        java_version=version,
        jvm_impl="hotspot",
        os=normalize_os(meta.os),
        release_type="ga",
        url=anchor.href,
        vendor=MICROSOFT_PROVIDER_ID,
        version=version,
    )


class MicrosoftProvider(VendorPlugin):
    name = MICROSOFT_PROVIDER_ID

    def fetch(self, ctx: ProviderContext) -> set[JvmRecord]:
        selector = href_suffix_selector(MICROSOFT_EXTENSIONS)
        anchors: dict[str, AnchorElement] = {}
        failures = 0
        for url in MICROSOFT_DOWNLOAD_PAGES:
            try:
                html = http.get_text(url, **ctx.http_kwargs())
            except FetchError as exc:
                failures += 1
                logger.error("[microsoft] error fetching releases: %s", exc)
                continue
            for anchor in anchors_from_doc(parse_document(html), selector):
                anchors.setdefault(anchor.href, anchor)
        if failures == len(MICROSOFT_DOWNLOAD_PAGES):
            raise FetchError("all download pages failed", MICROSOFT_PROVIDER_ID)

        records: set[JvmRecord] = set()
        for anchor in anchors.values():
            if "debugsymbols" in anchor.href or "-sources" in anchor.href:
                continue
            try:
                records.add(map_release(anchor, ctx))
            except ParseFailure as exc:
                logger.warning("%s", exc)
        return records


__all__ = [
    "FileNameMeta",
    "MicrosoftProvider",
    "map_release",
    "meta_from_name",
]
