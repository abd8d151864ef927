from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from jvm_harvester.canonicalizer import (
    normalize_architecture,
    normalize_os,
    normalize_version,
)
from jvm_harvester.errors import ParseFailure
from jvm_harvester.models import JvmRecord
from jvm_harvester.providers.base import ProviderContext, VendorPlugin
from jvm_harvester.providers.bellsoft import BellSoftRelease, fetch_releases

logger = logging.getLogger(__name__)

LIBERICA_PROVIDER_ID = "liberica"

_NAME_PATTERN = re.compile(
    r"^bellsoft-(?P<image>jdk|jre)(?P<version>\d[0-9a-z+.]*?)(?:-ea)?"
    r"-(?P<os>linux|macos|windows|solaris)"
    r"-(?P<arch>amd64|aarch64|arm32-vfp-hflt|i386|i586|ppc64le|riscv64|sparcv9|x64|x86_64)"
    r"(?P<features>(?:-(?:full|lite|crac|musl|leyden))*)"
    r"\.(?P<ext>apk|deb|dmg|msi|pkg|rpm|tar\.gz|zip)$"
)

# Bundle suffixes in file names and the feature tag each one stands for.
_FEATURE_TAGS = {
    "full": "javafx",
    "lite": "lite",
    "crac": "crac",
    "musl": "musl",
    "leyden": "leyden",
}


@dataclass(frozen=True)
class FileNameMeta:
    arch: str
    ext: str
    features: tuple[str, ...]
    image_type: str
    os: str
    version: str


def meta_from_name(name: str) -> FileNameMeta:
    logger.debug("[liberica] parsing name: %s", name)
    match = _NAME_PATTERN.match(name)
    if match is None:
        raise ParseFailure(
            f"regular expression did not match name: {name}",
            LIBERICA_PROVIDER_ID,
            name=name,
        )
    suffixes = [part for part in match["features"].split("-") if part]
    return FileNameMeta(
        arch=match["arch"],
        ext=match["ext"],
        features=tuple(_FEATURE_TAGS[part] for part in suffixes),
        image_type=match["image"],
        os=match["os"],
        version=match["version"],
    )


def map_release(release: BellSoftRelease) -> JvmRecord:
    meta = meta_from_name(release.filename)
    version = normalize_version(meta.version)
    return JvmRecord(
        architecture=normalize_architecture(meta.arch),
        checksum=release.checksum,
        features=meta.features,
        file_type=meta.ext,
        filename=release.filename,
        image_type=meta.image_type,
        java_version=version,
        jvm_impl="hotspot",
        os=normalize_os(meta.os),
        release_type=release.release_type,
        size=release.size or None,
        url=release.download_url,
        vendor=LIBERICA_PROVIDER_ID,
        version=version,
    )


class LibericaProvider(VendorPlugin):
    name = LIBERICA_PROVIDER_ID

    def fetch(self, ctx: ProviderContext) -> set[JvmRecord]:
        logger.debug("[liberica] fetching releases")
        records: set[JvmRecord] = set()
        for payload in fetch_releases("liberica/releases", ctx):
            filename = str(payload.get("filename") or "")
            if "-src" in filename:
                continue
            try:
                release = BellSoftRelease.from_payload(payload, self.name)
                records.add(map_release(release))
            except ParseFailure as exc:
                logger.warning("%s", exc)
        return records


__all__ = [
    "FileNameMeta",
    "LIBERICA_PROVIDER_ID",
    "LibericaProvider",
    "map_release",
    "meta_from_name",
]
