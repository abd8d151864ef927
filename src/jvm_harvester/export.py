from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Sequence

from jvm_harvester.models import FIELD_NAMES, JvmRecord, ensure_parent
from jvm_harvester.store import RecordSession

logger = logging.getLogger(__name__)

Filters = dict[str, list[str]]


@dataclass
class PartitionExport:
    vendor: str
    os: str
    architecture: str
    rows: list[dict[str, Any]] = field(default_factory=list)

    def relative_path(self) -> Path:
        return Path(self.vendor) / self.os / f"{self.architecture}.json"


def parse_filters(groups: Iterable[str]) -> Filters:
    """Parse ``key=v1,v2`` groups (optionally joined with ``&``).

    Repeating a key extends its accepted values.
    """

    filters: Filters = {}
    for group in groups:
        for part in group.split("&"):
            part = part.strip()
            if not part:
                continue
            if "=" not in part:
                raise ValueError(f"filter must look like key=value[,value]: {part!r}")
            key, raw_values = part.split("=", 1)
            key = key.strip()
            if key not in FIELD_NAMES:
                raise ValueError(f"unknown filter field: {key!r}")
            values = [value.strip() for value in raw_values.split(",") if value.strip()]
            filters.setdefault(key, []).extend(values)
    return filters


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def record_matches(record: JvmRecord, filters: Mapping[str, Sequence[str]]) -> bool:
    for key, accepted in filters.items():
        value = getattr(record, key)
        if key == "features":
            if not value or not set(value).intersection(accepted):
                return False
        elif _as_text(value) not in accepted:
            return False
    return True


def project(
    record: JvmRecord,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> dict[str, Any]:
    data = record.to_dict()
    if include:
        return {name: data[name] for name in FIELD_NAMES if name in include}
    if exclude:
        return {name: value for name, value in data.items() if name not in exclude}
    return data


def _sort_key(record: JvmRecord) -> tuple[str, str]:
    return (record.version, record.filename)


def export_partitions(
    store: RecordSession,
    vendors: Sequence[str] = (),
    oses: Sequence[str] = (),
    architectures: Sequence[str] = (),
    *,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
    filters: Mapping[str, Sequence[str]] | None = None,
) -> Iterator[PartitionExport]:
    """Yield one export per (vendor, os, architecture), empty ones included.

    Empty selections fall back to every distinct value in the store.
    ``StoreError`` is not caught.
    """

    vendors = list(vendors) or store.distinct("vendor")
    oses = list(oses) or store.distinct("os")
    architectures = list(architectures) or store.distinct("architecture")
    active = dict(filters or {})

    for vendor in vendors:
        for os_name in oses:
            for arch in architectures:
                records = store.query(vendor, os_name, arch)
                rows = [
                    project(record, include, exclude)
                    for record in sorted(records, key=_sort_key)
                    if record_matches(record, active)
                ]
                logger.info(
                    "exporting %d records for %s/%s/%s", len(rows), vendor, os_name, arch
                )
                yield PartitionExport(
                    vendor=vendor, os=os_name, architecture=arch, rows=rows
                )


def write_partition(root: Path, partition: PartitionExport, *, pretty: bool = False) -> Path:
    path = root / partition.relative_path()
    ensure_parent(path)
    with path.open("w", encoding="utf-8") as handle:
        if pretty:
            json.dump(partition.rows, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        else:
            json.dump(partition.rows, handle, ensure_ascii=False, separators=(",", ":"))
    return path


__all__ = [
    "Filters",
    "PartitionExport",
    "export_partitions",
    "parse_filters",
    "project",
    "record_matches",
    "write_partition",
]
