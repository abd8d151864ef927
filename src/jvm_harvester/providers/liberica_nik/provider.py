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

LIBERICA_NIK_PROVIDER_ID = "liberica-nik"

_NAME_PATTERN = re.compile(
    r"^bellsoft-liberica-vm(?:-core|-full)?-openjdk(?P<java>.*?)-(?P<version>.*?)(?:-ea)?"
    r"-(?P<os>linux|macos|windows)"
    r"-(?P<arch>amd64|aarch64|x86_64|x64|i586|arm32-vfp-hflt|ppc64le|riscv64)"
    r"(?:-musl)?\.(?P<ext>apk|deb|dmg|msi|pkg|rpm|tar\.gz|zip)$"
)


@dataclass(frozen=True)
class FileNameMeta:
    arch: str
    ext: str
    java_version: str
    os: str
    version: str


def meta_from_name(name: str) -> FileNameMeta:
    logger.debug("[liberica-nik] parsing name: %s", name)
    match = _NAME_PATTERN.match(name)
    if match is None:
        raise ParseFailure(
            f"regular expression did not match name: {name}",
            LIBERICA_NIK_PROVIDER_ID,
            name=name,
        )
    return FileNameMeta(
        arch=match["arch"],
        ext=match["ext"],
        java_version=match["java"],
        os=match["os"],
        version=match["version"],
    )


def normalize_features(release: BellSoftRelease) -> list[str]:
    return ["musl"] if "-musl" in release.filename else []


def map_release(release: BellSoftRelease) -> JvmRecord:
    meta = meta_from_name(release.filename)
    return JvmRecord(
        architecture=normalize_architecture(meta.arch),
        checksum=release.checksum,
        features=tuple(normalize_features(release)),
        file_type=release.package_type or meta.ext,
        filename=release.filename,
        image_type="jdk",
        java_version=normalize_version(meta.java_version),
        jvm_impl="graalvm",
        os=normalize_os(release.os or meta.os),
        release_type=release.release_type,
        size=release.size or None,
        url=release.download_url,
        vendor=LIBERICA_NIK_PROVIDER_ID,
        version=normalize_version(meta.version),
    )


class LibericaNikProvider(VendorPlugin):
    name = LIBERICA_NIK_PROVIDER_ID

    def fetch(self, ctx: ProviderContext) -> set[JvmRecord]:
        logger.debug("[liberica-nik] fetching releases")
        records: set[JvmRecord] = set()
        for payload in fetch_releases("nik/releases", ctx):
            filename = str(payload.get("filename") or "")
            if "-src" in filename:
                continue
            # only core bundles for now; full and standard repackage the same VM
            if "-core-" not in filename:
                continue
            try:
                release = BellSoftRelease.from_payload(payload, self.name)
                records.add(map_release(release))
            except ParseFailure as exc:
                logger.warning("%s", exc)
        return records


__all__ = [
    "FileNameMeta",
    "LIBERICA_NIK_PROVIDER_ID",
    "LibericaNikProvider",
    "map_release",
    "meta_from_name",
]
