from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

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
    ORACLE_ARCHIVE_URL,
    ORACLE_ARCHIVE_VERSIONS,
    ORACLE_DOWNLOADS_URL,
    ORACLE_EXTENSIONS,
    ORACLE_PROVIDER_ID,
)

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(
    r"^jdk-(?P<version>[0-9+.]{2,})_(?P<os>linux|macos|windows)-(?P<arch>x64|aarch64)"
    r"_bin\.(?P<ext>deb|dmg|exe|msi|rpm|tar\.gz|zip)$"
)
_HEADING_VERSION = re.compile(r"(?P<version>\d+\.\d+\.\d+)")
_ALIAS_MAJOR = re.compile(r"jdk-(?P<major>\d+)_")


@dataclass(frozen=True)
class FileNameMeta:
    arch: str
    ext: str
    os: str
    version: str


def build_urls() -> list[str]:
    urls = [ORACLE_DOWNLOADS_URL]
    for version in ORACLE_ARCHIVE_VERSIONS:
        urls.append(ORACLE_ARCHIVE_URL.format(version=version))
    return urls


def meta_from_name(name: str) -> FileNameMeta:
    logger.debug("[oracle] parsing name: %s", name)
    match = _NAME_PATTERN.match(name)
    if match is None:
        raise ParseFailure(
            f"regular expression did not match for {name}",
            ORACLE_PROVIDER_ID,
            name=name,
        )
    return FileNameMeta(
        arch=match["arch"],
        ext=match["ext"],
        os=match["os"],
        version=match["version"],
    )


def extract_latest_versions(document: BeautifulSoup) -> list[str]:
    """Versions announced in ``<h3 id="java..">`` headings of a download page."""

    versions: set[str] = set()
    for heading in document.select("h3[id^='java']"):
        for match in _HEADING_VERSION.finditer(heading.get_text()):
            versions.add(match["version"])
    return sorted(versions)


def replace_with_latest_version(
    anchor: AnchorElement, latest_versions: list[str]
) -> None:
    """Rewrite a ``/latest/`` alias name to embed the concrete version.

    ``jdk-21_linux-x64_bin.tar.gz`` becomes ``jdk-21.0.7_linux-x64_bin.tar.gz``
    when 21.0.7 is listed; the name is untouched without a matching major line.
    """

    if "/latest/" not in anchor.href:
        return
    alias = _ALIAS_MAJOR.search(anchor.name)
    if alias is None:
        return
    major = alias["major"]
    for version in latest_versions:
        if version.split(".", 1)[0] == major:
            anchor.name = anchor.name.replace(f"jdk-{major}_", f"jdk-{version}_")
            return


def map_release(anchor: AnchorElement, ctx: ProviderContext) -> JvmRecord:
    name = anchor.name.rsplit("/", 1)[-1]
    meta = meta_from_name(name)
    sha256_url: str | None = f"{anchor.href}.sha256"
    checksum = fetch_checksum(sha256_url, ctx)
    if checksum is None:
        sha256_url = None
    version = normalize_version(meta.version)
    return JvmRecord(
        architecture=normalize_architecture(meta.arch),
        checksum=checksum,
        checksum_url=sha256_url,
        file_type=meta.ext,
        filename=name,
        image_type="jdk",
        java_version=version,
        jvm_impl="hotspot",
        os=normalize_os(meta.os),
        release_type="ga",
        url=anchor.href,
        vendor=ORACLE_PROVIDER_ID,
        version=version,
    )


class OracleProvider(VendorPlugin):
    name = ORACLE_PROVIDER_ID

    def _collect_anchors(self, ctx: ProviderContext) -> list[AnchorElement]:
        selector = href_suffix_selector(ORACLE_EXTENSIONS)
        anchors: list[AnchorElement] = []
        urls = build_urls()
        failures = 0
        for url in urls:
            try:
                html = http.get_text(url, **ctx.http_kwargs())
            except FetchError as exc:
                failures += 1
                logger.error("[oracle] error fetching releases: %s", exc)
                continue
            document = parse_document(html)
            latest_versions = extract_latest_versions(document)
            for anchor in anchors_from_doc(document, selector):
                replace_with_latest_version(anchor, latest_versions)
                anchors.append(anchor)
        if failures == len(urls):
            raise FetchError("all download pages failed", ORACLE_PROVIDER_ID)
        return anchors

    def fetch(self, ctx: ProviderContext) -> set[JvmRecord]:
        records: set[JvmRecord] = set()
        seen: set[tuple[str, str]] = set()
        for anchor in self._collect_anchors(ctx):
            # GraalVM bundles share the download pages
            if "graalvm-" in anchor.href:
                continue
            if (anchor.href, anchor.name) in seen:
                continue
            seen.add((anchor.href, anchor.name))
            try:
                records.add(map_release(anchor, ctx))
            except ParseFailure as exc:
                logger.warning("%s", exc)
        return records


__all__ = [
    "FileNameMeta",
    "OracleProvider",
    "build_urls",
    "extract_latest_versions",
    "map_release",
    "meta_from_name",
    "replace_with_latest_version",
]
