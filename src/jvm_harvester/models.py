from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class JvmRecord:
    """One downloadable JVM artifact in canonical form.

    Equality and hashing cover every field, so two records describing the
    same artifact with identical values collapse into one set member.
    """

    architecture: str
    os: str
    version: str
    vendor: str
    filename: str
    url: str
    java_version: str = ""
    file_type: str = ""
    image_type: str = "jdk"
    jvm_impl: str = "hotspot"
    release_type: str = "ga"
    checksum: str | None = None
    checksum_url: str | None = None
    features: tuple[str, ...] | None = None
    size: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", _normalize_features(self.features))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name in FIELD_NAMES:
            value = getattr(self, name)
            if name == "features" and value is not None:
                value = list(value)
            data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JvmRecord:
        known = {name: data[name] for name in FIELD_NAMES if name in data}
        features = known.get("features")
        if features is not None:
            known["features"] = tuple(features)
        return cls(**known)


def _normalize_features(
    value: Iterable[str] | None,
) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    tags: list[str] = []
    for tag in value:
        cleaned = str(tag).strip().lower()
        if cleaned and cleaned not in tags:
            tags.append(cleaned)
    return tuple(tags) or None


# Canonical output order for exported rows.
FIELD_NAMES: tuple[str, ...] = tuple(
    sorted(field.name for field in fields(JvmRecord))
)


def merge_records(*groups: Iterable[JvmRecord]) -> set[JvmRecord]:
    """Union record groups from several sources into one deduplicated set."""

    merged: set[JvmRecord] = set()
    for group in groups:
        merged.update(group)
    return merged


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


__all__ = [
    "FIELD_NAMES",
    "JvmRecord",
    "ensure_parent",
    "merge_records",
]
