from __future__ import annotations

import pytest

from conftest import FakeResponse
from jvm_harvester.errors import FetchError, ParseFailure
from jvm_harvester.providers.base import ProviderContext
from jvm_harvester.providers.html import AnchorElement, parse_document
from jvm_harvester.providers.oracle.local_constants import ORACLE_DOWNLOADS_URL
from jvm_harvester.providers.oracle.provider import (
    FileNameMeta,
    OracleProvider,
    build_urls,
    extract_latest_versions,
    meta_from_name,
    replace_with_latest_version,
)

DOWNLOADS_HTML = """
<html><body>
<h3 id="java24">Java SE Development Kit 24.0.1 downloads</h3>
<a href="https://download.oracle.com/java/24/latest/jdk-24_linux-aarch64_bin.tar.gz">jdk-24</a>
<a href="https://download.oracle.com/java/24/latest/jdk-24_linux-aarch64_bin.tar.gz.sha256">sha256</a>
<h3 id="java21">Java SE Development Kit 21.0.7 downloads</h3>
<a href="https://download.oracle.com/java/21/latest/jdk-21_windows-x64_bin.zip">jdk-21</a>
<a href="https://download.oracle.com/java/21/latest/jdk-21_windows-x64_bin.zip">jdk-21 again</a>
<a href="https://download.oracle.com/graalvm/21/latest/graalvm-jdk-21_linux-x64_bin.tar.gz">graalvm</a>
<h3 id="graalvm">GraalVM for JDK 21</h3>
</body></html>
"""


def test_build_urls_covers_downloads_and_archives():
    urls = build_urls()
    assert urls[0] == ORACLE_DOWNLOADS_URL
    assert any(url.endswith("jdk17-archive-downloads.html") for url in urls)
    assert len(urls) == len(set(urls))


def test_replace_with_latest_version():
    versions = ["21.0.7", "24.0.1"]
    for href, expected in [
        (
            "https://download.oracle.com/java/24/latest/jdk-24_linux-aarch64_bin.tar.gz",
            "https://download.oracle.com/java/24/latest/jdk-24.0.1_linux-aarch64_bin.tar.gz",
        ),
        (
            "https://download.oracle.com/java/21/latest/jdk-21_linux-aarch64_bin.tar.gz",
            "https://download.oracle.com/java/21/latest/jdk-21.0.7_linux-aarch64_bin.tar.gz",
        ),
        (
            "https://download.oracle.com/java/17/latest/jdk-17_linux-aarch64_bin.tar.gz",
            "https://download.oracle.com/java/17/latest/jdk-17_linux-aarch64_bin.tar.gz",
        ),
        (
            "https://download.oracle.com/java/21/archive/jdk-21_linux-aarch64_bin.tar.gz",
            "https://download.oracle.com/java/21/archive/jdk-21_linux-aarch64_bin.tar.gz",
        ),
    ]:
        anchor = AnchorElement(href=href, name=href)
        replace_with_latest_version(anchor, versions)
        assert anchor.name == expected
        assert anchor.href == href


def test_extract_latest_versions():
    versions = extract_latest_versions(parse_document(DOWNLOADS_HTML))
    assert versions == ["21.0.7", "24.0.1"]


def test_meta_from_name():
    for name, expected in [
        (
            "jdk-17.0.7_linux-aarch64_bin.tar.gz",
            FileNameMeta(arch="aarch64", ext="tar.gz", os="linux", version="17.0.7"),
        ),
        (
            "jdk-21_macos-aarch64_bin.tar.gz",
            FileNameMeta(arch="aarch64", ext="tar.gz", os="macos", version="21"),
        ),
        (
            "jdk-23_windows-x64_bin.zip",
            FileNameMeta(arch="x64", ext="zip", os="windows", version="23"),
        ),
        (
            "jdk-21.0.4_linux-x64_bin.deb",
            FileNameMeta(arch="x64", ext="deb", os="linux", version="21.0.4"),
        ),
    ]:
        assert meta_from_name(name) == expected


def test_meta_from_name_rejects_invalid_names():
    for name in [
        "graalvm-jdk-21_linux-aarch64_bin.tar.gz",
        "jdk-21.0.4_linux_bin.tar.gz",
        "jdk-21.0.4_linux-aarch64.tar.gz",
        "jdk-21.0.4_linux-aarch64_bin.unknown",
        "jdk-21.0.4_unknown-aarch64_bin.tar.gz",
        "jdk-21.0.4_linux-unknown_bin.tar.gz",
    ]:
        with pytest.raises(ParseFailure):
            meta_from_name(name)


def test_fetch_resolves_aliases_and_skips_graalvm(fake_http):
    fake_http.routes[ORACLE_DOWNLOADS_URL] = FakeResponse(text=DOWNLOADS_HTML)
    fake_http.routes[
        "https://download.oracle.com/java/24/latest/jdk-24_linux-aarch64_bin.tar.gz.sha256"
    ] = FakeResponse(text="5eed")
    # archive pages and the windows checksum are unrouted and fail

    records = OracleProvider().fetch(ProviderContext(name="oracle"))

    by_name = {record.filename: record for record in records}
    assert sorted(by_name) == [
        "jdk-21.0.7_windows-x64_bin.zip",
        "jdk-24.0.1_linux-aarch64_bin.tar.gz",
    ]

    linux = by_name["jdk-24.0.1_linux-aarch64_bin.tar.gz"]
    assert linux.url == (
        "https://download.oracle.com/java/24/latest/jdk-24_linux-aarch64_bin.tar.gz"
    )
    assert linux.version == "24.0.1"
    assert linux.java_version == "24.0.1"
    assert linux.os == "linux"
    assert linux.architecture == "aarch64"
    assert linux.checksum == "sha256:5eed"
    assert linux.checksum_url == linux.url + ".sha256"

    windows = by_name["jdk-21.0.7_windows-x64_bin.zip"]
    assert windows.architecture == "x86_64"
    assert windows.checksum is None
    assert windows.checksum_url is None
    assert not any("graalvm" in url for url, _kwargs in fake_http.calls)


def test_fetch_fails_when_every_page_fails(fake_http):
    with pytest.raises(FetchError) as excinfo:
        OracleProvider().fetch(ProviderContext(name="oracle"))
    assert excinfo.value.vendor == "oracle"
