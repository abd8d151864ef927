from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from jvm_harvester.registry import load_vocabulary, raw_key_lookup

logger = logging.getLogger(__name__)

_LEGACY_VERSION = re.compile(r"^1\.\d+")
_BUILD_SUFFIX = re.compile(r"-b(?P<build>\d+)$")
_VERSION_PREFIX = re.compile(r"^(?:jdk-?|v)(?=\d)", re.IGNORECASE)


@dataclass(frozen=True)
class NormalizationGap:
    kind: str
    raw: str


@lru_cache(maxsize=None)
def _lookup(kind: str) -> dict[str, str]:
    return raw_key_lookup(load_vocabulary(), kind)


def _report_gap(kind: str, raw: str) -> None:
    gap = NormalizationGap(kind=kind, raw=raw)
    logger.warning("[canonicalizer] no canonical %s for %r", gap.kind, gap.raw)


def _canonical(kind: str, raw: str) -> str:
    value = raw.strip()
    canonical = _lookup(kind).get(value.lower())
    if canonical is None:
        _report_gap(kind, raw)
        return raw
    return canonical


def normalize_os(raw: str) -> str:
    return _canonical("os", raw)


def normalize_architecture(raw: str) -> str:
    return _canonical("architecture", raw)


def normalize_version(raw: str) -> str:
    """Reshape vendor version strings onto one build-delimiter scheme.

    ``+`` is the canonical build separator: ``17.0.6_10`` and ``17.0.6-b10``
    both become ``17.0.6+10``. Legacy ``1.8.0_392`` update numbers keep their
    underscore since it is part of the version, not a build number.
    """

    version = _VERSION_PREFIX.sub("", raw.strip())
    version = _BUILD_SUFFIX.sub(r"+\g<build>", version)
    if "_" in version and not _LEGACY_VERSION.match(version):
        version = version.replace("_", "+")
    return version


__all__ = [
    "NormalizationGap",
    "normalize_architecture",
    "normalize_os",
    "normalize_version",
]
