from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path

import yaml  # type: ignore[import-untyped]


@dataclass
class CanonicalTerm:
    name: str
    raw_keys: list[str]
    description: str | None = None


@dataclass
class Vocabulary:
    tables: dict[str, dict[str, CanonicalTerm]] = field(default_factory=dict)

    def kinds(self) -> list[str]:
        return sorted(self.tables)


def default_vocabulary_path() -> Path:
    packaged = resources.files("jvm_harvester.registry").joinpath("vocabulary.yaml")
    return Path(str(packaged))


def load_vocabulary(path: str | Path | None = None) -> Vocabulary:
    source = Path(path) if path is not None else default_vocabulary_path()
    data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    tables: dict[str, dict[str, CanonicalTerm]] = {}
    for kind, terms in (data.get("tables") or {}).items():
        table: dict[str, CanonicalTerm] = {}
        for name, cfg in (terms or {}).items():
            cfg = cfg or {}
            table[str(name)] = CanonicalTerm(
                name=str(name),
                raw_keys=[str(raw) for raw in cfg.get("raw_keys", [])],
                description=cfg.get("description"),
            )
        tables[str(kind)] = table
    return Vocabulary(tables=tables)


def canonical_terms(vocabulary: Vocabulary, kind: str) -> list[str]:
    return list(vocabulary.tables.get(kind, {}).keys())


def raw_key_lookup(vocabulary: Vocabulary, kind: str) -> dict[str, str]:
    """Return reverse lookup lower-cased raw spelling -> canonical term.

    Canonical names are included as their own spellings.
    """

    reverse: dict[str, str] = {}
    for canonical, term in vocabulary.tables.get(kind, {}).items():
        reverse[canonical.lower()] = canonical
        for raw in term.raw_keys:
            reverse[raw.lower()] = canonical
    return reverse


__all__ = [
    "CanonicalTerm",
    "Vocabulary",
    "canonical_terms",
    "default_vocabulary_path",
    "load_vocabulary",
    "raw_key_lookup",
]
