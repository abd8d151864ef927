from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Iterable

from jvm_harvester.errors import HarvesterError
from jvm_harvester.models import JvmRecord, merge_records
from jvm_harvester.providers.base import ProviderContext
from jvm_harvester.providers.registry import ProviderEntry, ProviderRegistry
from jvm_harvester.store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
# Re-check interval while some tasks are still queued behind the pool.
_POLL_S = 0.05


@dataclass
class SourceOutcome:
    name: str
    ok: bool
    records: set[JvmRecord] = field(default_factory=set)
    written: int | None = None
    error: str | None = None
    elapsed_s: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "vendor": self.name,
            "ok": self.ok,
            "records": len(self.records),
            "written": self.written,
            "error": self.error,
            "elapsed_s": round(self.elapsed_s, 3),
        }


@dataclass
class FetchSummary:
    outcomes: list[SourceOutcome] = field(default_factory=list)
    records: set[JvmRecord] = field(default_factory=set)
    elapsed_s: float = 0.0

    @property
    def succeeded(self) -> list[str]:
        return [outcome.name for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[str]:
        return [outcome.name for outcome in self.outcomes if not outcome.ok]


@dataclass
class _SourceTask:
    """Per-vendor bookkeeping shared between the pool thread and the run loop.

    The deadline only starts once the task is picked up by a worker. A task
    is either abandoned by the run loop or commits its records, never both.
    """

    entry: ProviderEntry
    started: float | None = None
    committing: bool = False
    abandoned: threading.Event = field(default_factory=threading.Event)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def name(self) -> str:
        return self.entry.info.name

    def claim_commit(self) -> bool:
        with self._lock:
            if self.abandoned.is_set():
                return False
            self.committing = True
            return True

    def abandon(self) -> bool:
        with self._lock:
            if self.committing:
                return False
            self.abandoned.set()
            return True


def _run_source(
    task: _SourceTask,
    store: RecordStore | None,
    options: dict[str, Any],
) -> SourceOutcome:
    name = task.name
    started = time.monotonic()
    task.started = started
    outcome = SourceOutcome(name=name, ok=False)
    try:
        logger.info("[%s] fetching meta data", name)
        ctx = ProviderContext(name=name, options=dict(options))
        outcome.records = set(task.entry.plugin.fetch(ctx))
        logger.info("[%s] found %d records", name, len(outcome.records))
        if not task.claim_commit():
            logger.warning(
                "[%s] finished after its deadline, dropping %d records",
                name,
                len(outcome.records),
            )
            outcome.records = set()
            outcome.error = "abandoned after timeout"
            return outcome
        if store is not None:
            logger.info("[%s] writing to database", name)
            with store.connection() as session:
                outcome.written = session.upsert(outcome.records)
            logger.info("[%s] inserted/modified %d records", name, outcome.written)
        outcome.ok = True
    except HarvesterError as exc:
        outcome.error = str(exc)
        logger.error("[%s] failed: %s", name, exc)
    except Exception as exc:  # noqa: BLE001
        outcome.error = f"{type(exc).__name__}: {exc}"
        logger.exception("[%s] unexpected error", name)
    finally:
        outcome.elapsed_s = time.monotonic() - started
    return outcome


def _expire(
    pending: set[Future[SourceOutcome]],
    tasks: dict[Future[SourceOutcome], _SourceTask],
    task_timeout: float,
) -> tuple[list[_SourceTask], float | None]:
    """Abandon tasks past their own deadline; return them and the next wait."""

    now = time.monotonic()
    expired: list[_SourceTask] = []
    next_wait: float | None = None
    for future in list(pending):
        task = tasks[future]
        if future.done():
            continue
        if task.started is None:
            # still queued; its deadline starts when a worker picks it up
            next_wait = _POLL_S if next_wait is None else min(next_wait, _POLL_S)
            continue
        if task.committing:
            continue
        remaining = task.started + task_timeout - now
        if remaining > 0:
            next_wait = remaining if next_wait is None else min(next_wait, remaining)
        elif task.abandon():
            pending.discard(future)
            expired.append(task)
    return expired, next_wait


def run_fetch(
    registry: ProviderRegistry,
    names: Iterable[str] | None = None,
    store: RecordStore | None = None,
    *,
    options: dict[str, Any] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    task_timeout: float | None = None,
) -> FetchSummary:
    """Fetch every selected vendor concurrently and merge the results.

    Failed vendors contribute no records and are reported in the summary;
    the run itself only fails on programming errors. With ``task_timeout``,
    each vendor gets that many seconds from the moment a worker starts it.
    Vendors past their deadline are reported as timed out, no longer waited
    for, and never write to the store.
    """

    selected = registry.select(names)
    if names:
        logger.info("fetching vendors: %s", ", ".join(e.info.name for e in selected))
    else:
        logger.info("fetching all vendors")

    started = time.monotonic()
    summary = FetchSummary()
    if not selected:
        return summary

    opts = dict(options or {})
    executor = ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(selected))),
        thread_name_prefix="fetch",
    )
    tasks: dict[Future[SourceOutcome], _SourceTask] = {}
    for entry in selected:
        task = _SourceTask(entry=entry)
        tasks[executor.submit(_run_source, task, store, opts)] = task

    timed_out: list[_SourceTask] = []
    pending = set(tasks)
    try:
        while pending:
            next_wait: float | None = None
            if task_timeout is not None:
                expired, next_wait = _expire(pending, tasks, task_timeout)
                timed_out.extend(expired)
                if not pending:
                    break
            _done, pending = wait(pending, timeout=next_wait, return_when=FIRST_COMPLETED)
    finally:
        executor.shutdown(wait=not timed_out, cancel_futures=True)

    for future, task in tasks.items():
        if task.abandoned.is_set():
            logger.error(
                "[%s] failed: timed out after %.1f seconds", task.name, task_timeout
            )
            summary.outcomes.append(
                SourceOutcome(
                    name=task.name,
                    ok=False,
                    error=f"timed out after {task_timeout} seconds",
                    elapsed_s=time.monotonic() - (task.started or started),
                )
            )
            continue
        summary.outcomes.append(future.result())

    summary.outcomes.sort(key=lambda outcome: outcome.name)
    summary.records = merge_records(*(o.records for o in summary.outcomes if o.ok))
    summary.elapsed_s = time.monotonic() - started
    logger.info(
        "fetched %d vendors (%d failed) in %.2f seconds",
        len(summary.outcomes),
        len(summary.failed),
        summary.elapsed_s,
    )
    return summary


__all__ = ["DEFAULT_MAX_WORKERS", "FetchSummary", "SourceOutcome", "run_fetch"]
