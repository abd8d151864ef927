from __future__ import annotations

from jvm_harvester.models import FIELD_NAMES, JvmRecord, merge_records


def _record(**overrides):
    values = {
        "architecture": "x86_64",
        "os": "linux",
        "version": "21.0.2+13",
        "vendor": "zulu",
        "filename": "zulu21.32.17-ca-jdk21.0.2-linux_x64.tar.gz",
        "url": "https://cdn.azul.com/zulu/bin/zulu21.32.17-ca-jdk21.0.2-linux_x64.tar.gz",
    }
    values.update(overrides)
    return JvmRecord(**values)


def test_identical_records_collapse_in_a_set():
    assert len({_record(), _record()}) == 1
    assert len({_record(), _record(size=10)}) == 2


def test_merge_records_unions_groups():
    a = _record()
    b = _record(architecture="aarch64", url="https://example.test/b.tar.gz")
    merged = merge_records([a], [a, b], [])
    assert merged == {a, b}


def test_features_are_lowercased_deduplicated_and_empty_is_none():
    assert _record(features=["MUSL", "javafx", "musl"]).features == ("musl", "javafx")
    assert _record(features=[]).features is None
    assert _record(features=None).features is None
    assert _record(features=("musl",)) == _record(features=["musl"])


def test_to_dict_uses_sorted_field_order():
    data = _record(features=("musl",)).to_dict()
    assert list(data) == list(FIELD_NAMES)
    assert list(FIELD_NAMES) == sorted(FIELD_NAMES)
    assert data["features"] == ["musl"]
    assert data["image_type"] == "jdk"
    assert data["jvm_impl"] == "hotspot"
    assert data["checksum"] is None


def test_from_dict_restores_record():
    record = _record(features=("crac", "musl"), size=2048, checksum="sha256:ab")
    assert JvmRecord.from_dict(record.to_dict()) == record
