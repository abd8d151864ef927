from __future__ import annotations

import pytest

from jvm_harvester.providers.registry import (
    ProviderEntry,
    ProviderInfo,
    ProviderRegistry,
    default_registry,
)


class _Plugin:
    def __init__(self, name: str) -> None:
        self.name = name

    def fetch(self, ctx):
        return set()


def _entry(name: str) -> ProviderEntry:
    return ProviderEntry(plugin=_Plugin(name), info=ProviderInfo(name, name.title(), ""))


def test_default_registry_lists_builtin_vendors():
    registry = default_registry()
    assert registry.available() == [
        "liberica",
        "liberica-nik",
        "microsoft",
        "oracle",
        "zulu",
    ]
    assert registry.info("oracle").transport == "html"
    assert registry.info("zulu").transport == "json"
    assert registry.get("zulu").name == "zulu"


def test_select_ignores_unknown_names_and_empty_means_all():
    registry = ProviderRegistry([_entry("b"), _entry("a"), _entry("c")])

    assert [e.info.name for e in registry.select(["c", "nope", "a"])] == ["a", "c"]
    assert [e.info.name for e in registry.select([])] == ["a", "b", "c"]
    assert [e.info.name for e in registry.select(None)] == ["a", "b", "c"]
    assert registry.select(["nope"]) == []


def test_duplicate_and_missing_names():
    with pytest.raises(ValueError):
        ProviderRegistry([_entry("a"), _entry("a")])

    registry = ProviderRegistry([_entry("a")])
    assert "a" in registry
    assert "b" not in registry
    with pytest.raises(KeyError):
        registry.get("b")
