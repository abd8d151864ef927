from __future__ import annotations

import logging

import pytest

from jvm_harvester.canonicalizer import (
    normalize_architecture,
    normalize_os,
    normalize_version,
)
from jvm_harvester.registry import canonical_terms, load_vocabulary, raw_key_lookup


def test_os_spellings_map_to_canonical_names():
    for raw, expected in [
        ("linux", "linux"),
        ("alpine", "linux"),
        ("macos", "macosx"),
        ("macosx", "macosx"),
        ("darwin", "macosx"),
        ("win", "windows"),
        ("Windows", "windows"),
        ("solaris", "solaris"),
        ("aix", "aix"),
    ]:
        assert normalize_os(raw) == expected


def test_architecture_spellings_map_to_canonical_names():
    for raw, expected in [
        ("x64", "x86_64"),
        ("amd64", "x86_64"),
        ("x86_64", "x86_64"),
        ("x86", "i686"),
        ("i386", "i686"),
        ("i586", "i686"),
        ("arm64", "aarch64"),
        ("aarch64", "aarch64"),
        ("aarch32hf", "arm32-vfp-hflt"),
        ("aarch32sf", "arm32"),
        ("ppc64", "ppc64"),
        ("ppc64le", "ppc64le"),
        ("sparcv9", "sparcv9"),
        ("riscv64", "riscv64"),
    ]:
        assert normalize_architecture(raw) == expected


@pytest.mark.parametrize(
    "normalize, raw",
    [
        (normalize_os, "alpine"),
        (normalize_os, "darwin"),
        (normalize_architecture, "x64"),
        (normalize_architecture, "i586"),
        (normalize_architecture, "aarch32hf"),
    ],
)
def test_normalization_is_idempotent(normalize, raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_unknown_token_passes_through_and_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="jvm_harvester.canonicalizer"):
        assert normalize_architecture("mips64el") == "mips64el"
        assert normalize_os("haiku") == "haiku"

    messages = [record.getMessage() for record in caplog.records]
    assert any("mips64el" in message for message in messages)
    assert any("haiku" in message for message in messages)


def test_version_build_delimiters_are_unified():
    for raw, expected in [
        ("17.0.6+10", "17.0.6+10"),
        ("17.0.6_10", "17.0.6+10"),
        ("17.0.6-b10", "17.0.6+10"),
        ("jdk-21.0.2", "21.0.2"),
        ("v22.3.1", "22.3.1"),
        ("1.8.0_392", "1.8.0_392"),
        ("21.0.4", "21.0.4"),
    ]:
        assert normalize_version(raw) == expected


def test_version_normalization_is_idempotent():
    for raw in ["17.0.6_10", "jdk-21.0.2", "1.8.0_392", "17.0.6-b10"]:
        once = normalize_version(raw)
        assert normalize_version(once) == once


def test_packaged_vocabulary_lists_canonical_terms():
    vocabulary = load_vocabulary()
    assert vocabulary.kinds() == ["architecture", "os"]
    assert canonical_terms(vocabulary, "os") == [
        "linux",
        "macosx",
        "windows",
        "solaris",
        "aix",
    ]
    assert canonical_terms(vocabulary, "architecture") == [
        "x86_64",
        "i686",
        "aarch64",
        "arm32",
        "arm32-vfp-hflt",
        "ppc32",
        "ppc64",
        "ppc64le",
        "s390x",
        "sparcv9",
        "riscv64",
    ]
    lookup = raw_key_lookup(vocabulary, "architecture")
    assert lookup["amd64"] == "x86_64"
    assert lookup["arm64"] == "aarch64"
