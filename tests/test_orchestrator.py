from __future__ import annotations

import threading
import time
from pathlib import Path

from jvm_harvester.errors import FetchError
from jvm_harvester.models import JvmRecord
from jvm_harvester.orchestrator import run_fetch
from jvm_harvester.providers.registry import ProviderEntry, ProviderInfo, ProviderRegistry
from jvm_harvester.store import SqliteRecordStore

SHARED = JvmRecord(
    architecture="x86_64",
    os="linux",
    version="21.0.2",
    vendor="shared",
    filename="shared.tar.gz",
    url="https://example.test/shared.tar.gz",
)


def _record(vendor: str, name: str) -> JvmRecord:
    return JvmRecord(
        architecture="x86_64",
        os="linux",
        version="21.0.2",
        vendor=vendor,
        filename=name,
        url=f"https://example.test/{vendor}/{name}",
    )


class _StaticPlugin:
    def __init__(self, name: str, records: set[JvmRecord]) -> None:
        self.name = name
        self.records = records
        self.contexts = []

    def fetch(self, ctx):
        self.contexts.append(ctx)
        return set(self.records)


class _FailingPlugin:
    def __init__(self, name: str, exc: Exception) -> None:
        self.name = name
        self.exc = exc

    def fetch(self, ctx):
        raise self.exc


class _BlockingPlugin:
    def __init__(self, name: str, release: threading.Event) -> None:
        self.name = name
        self.release = release

    def fetch(self, ctx):
        self.release.wait(5)
        return {_record(self.name, "late.tar.gz")}


def _registry(*plugins) -> ProviderRegistry:
    return ProviderRegistry(
        ProviderEntry(plugin=plugin, info=ProviderInfo(plugin.name, plugin.name, ""))
        for plugin in plugins
    )


def test_failed_vendor_does_not_abort_the_run(tmp_path: Path):
    alpha = _StaticPlugin("alpha", {_record("alpha", "a.tar.gz"), SHARED})
    beta = _StaticPlugin("beta", {_record("beta", "b.tar.gz"), SHARED})
    broken = _FailingPlugin("broken", FetchError("upstream is down", "broken"))
    store = SqliteRecordStore(tmp_path / "jvm.sqlite3")

    summary = run_fetch(
        _registry(alpha, beta, broken),
        store=store,
        options={"http_timeout": 3.0, "user_agent": "tests"},
    )

    assert [o.name for o in summary.outcomes] == ["alpha", "beta", "broken"]
    assert summary.succeeded == ["alpha", "beta"]
    assert summary.failed == ["broken"]
    assert summary.outcomes[2].error == "[broken] upstream is down"
    assert summary.records == {
        _record("alpha", "a.tar.gz"),
        _record("beta", "b.tar.gz"),
        SHARED,
    }
    # the shared record is already stored by whichever vendor wrote first
    assert sorted(o.written for o in summary.outcomes[:2]) == [1, 2]
    assert store.distinct("vendor") == ["alpha", "beta", "shared"]
    assert alpha.contexts[0].timeout == 3.0
    assert alpha.contexts[0].user_agent == "tests"


def test_unexpected_exception_is_reported_per_vendor():
    summary = run_fetch(
        _registry(_FailingPlugin("oops", RuntimeError("boom")), _StaticPlugin("ok", set()))
    )
    outcomes = {o.name: o for o in summary.outcomes}
    assert summary.failed == ["oops"]
    assert outcomes["oops"].error == "RuntimeError: boom"
    assert outcomes["oops"].records == set()
    assert summary.succeeded == ["ok"]


def test_selection_limits_fetched_vendors():
    alpha = _StaticPlugin("alpha", {_record("alpha", "a.tar.gz")})
    beta = _StaticPlugin("beta", {_record("beta", "b.tar.gz")})

    summary = run_fetch(_registry(alpha, beta), ["beta", "unknown"])

    assert [o.name for o in summary.outcomes] == ["beta"]
    assert alpha.contexts == []
    assert summary.outcomes[0].written is None


def test_slow_vendor_times_out():
    release = threading.Event()
    try:
        summary = run_fetch(
            _registry(_BlockingPlugin("slow", release), _StaticPlugin("fast", set())),
            task_timeout=0.2,
        )
    finally:
        release.set()

    assert summary.succeeded == ["fast"]
    assert summary.failed == ["slow"]
    assert "timed out" in (summary.outcomes[1].error or "")
    assert summary.records == set()


def test_outcome_manifest_shape():
    summary = run_fetch(_registry(_StaticPlugin("alpha", {_record("alpha", "a.zip")})))
    data = summary.outcomes[0].to_dict()
    assert data["vendor"] == "alpha"
    assert data["ok"] is True
    assert data["records"] == 1
    assert data["error"] is None


class _SleepyPlugin:
    def __init__(self, name: str, seconds: float) -> None:
        self.name = name
        self.seconds = seconds

    def fetch(self, ctx):
        time.sleep(self.seconds)
        return {_record(self.name, "slept.tar.gz")}


def _join_fetch_threads() -> None:
    for thread in threading.enumerate():
        if thread.name.startswith("fetch"):
            thread.join(5)


def test_deadline_starts_when_a_worker_picks_the_task_up():
    summary = run_fetch(
        _registry(_SleepyPlugin("a", 0.3), _SleepyPlugin("b", 0.3)),
        max_workers=1,
        task_timeout=0.5,
    )

    assert summary.failed == []
    assert summary.succeeded == ["a", "b"]
    assert summary.records == {_record("a", "slept.tar.gz"), _record("b", "slept.tar.gz")}


def test_timed_out_vendor_never_reaches_the_store(tmp_path: Path):
    store = SqliteRecordStore(tmp_path / "jvm.sqlite3")
    release = threading.Event()
    try:
        summary = run_fetch(
            _registry(_BlockingPlugin("slow", release)),
            store=store,
            task_timeout=0.1,
        )
    finally:
        release.set()
    _join_fetch_threads()

    assert summary.failed == ["slow"]
    assert store.distinct("vendor") == []
