from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Mapping

from jvm_harvester.models import ensure_parent

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def write_jsonl(path: Path, records: Iterable[Mapping[str, object]]) -> None:
    ensure_parent(path)
    with path.open("w", encoding="utf-8") as handle:
        for record in records:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


__all__ = ["configure_logging", "write_jsonl"]
