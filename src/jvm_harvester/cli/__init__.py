"""CLI entry points for JVM Harvester."""

import importlib
from typing import Any, cast

_cli_mod = importlib.import_module("jvm_harvester.cli.app")
app = cast(Any, _cli_mod).app
export_vendor = cast(Any, _cli_mod).export_vendor
fetch = cast(Any, _cli_mod).fetch
providers = cast(Any, _cli_mod).providers
run = cast(Any, _cli_mod).run
version = cast(Any, _cli_mod).version

__all__ = [
    "app",
    "export_vendor",
    "fetch",
    "providers",
    "run",
    "version",
]
