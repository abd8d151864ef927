from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml  # type: ignore[import-untyped]

from jvm_harvester.errors import ConfigError
from jvm_harvester.http import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT
from jvm_harvester.orchestrator import DEFAULT_MAX_WORKERS

CONFIG_ENV = "JVM_HARVESTER_CONFIG"

# Environment variable -> settings field.
_ENV_FIELDS = {
    "JVM_HARVESTER_DATABASE": "database_path",
    "JVM_HARVESTER_EXPORT_PATH": "export_path",
    "JVM_HARVESTER_HTTP_TIMEOUT": "http_timeout",
    "JVM_HARVESTER_USER_AGENT": "user_agent",
    "JVM_HARVESTER_MAX_WORKERS": "max_workers",
    "JVM_HARVESTER_TASK_TIMEOUT": "task_timeout",
}


@dataclass(frozen=True)
class HarvesterSettings:
    database_path: Path = Path("jvm-harvester.sqlite3")
    export_path: Path | None = None
    http_timeout: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    max_workers: int = DEFAULT_MAX_WORKERS
    task_timeout: float | None = None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> HarvesterSettings:
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, raw in options.items():
            if key not in known or raw is None or raw == "":
                continue
            values[key] = _coerce(key, raw)
        return cls(**values)

    def http_options(self) -> dict[str, Any]:
        return {"http_timeout": self.http_timeout, "user_agent": self.user_agent}

    def require_export_path(self) -> Path:
        if self.export_path is None:
            raise ConfigError(
                "export.path is not configured "
                "(set it in the config file or JVM_HARVESTER_EXPORT_PATH)"
            )
        return self.export_path


def _coerce(key: str, raw: Any) -> Any:
    try:
        if key in {"database_path", "export_path"}:
            return Path(str(raw)).expanduser()
        if key in {"http_timeout", "task_timeout"}:
            return float(raw)
        if key == "max_workers":
            return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid value for {key}: {raw!r}") from exc
    return str(raw)


def _flatten_file(data: Mapping[str, Any]) -> dict[str, Any]:
    """Accept both flat keys and ``database.path`` / ``export.path`` sections."""

    flat = {key: value for key, value in data.items() if not isinstance(value, Mapping)}
    database = data.get("database")
    if isinstance(database, Mapping) and "path" in database:
        flat["database_path"] = database["path"]
    export = data.get("export")
    if isinstance(export, Mapping) and "path" in export:
        flat["export_path"] = export["path"]
    http = data.get("http")
    if isinstance(http, Mapping):
        if "timeout" in http:
            flat["http_timeout"] = http["timeout"]
        if "user_agent" in http:
            flat["user_agent"] = http["user_agent"]
    return flat


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> HarvesterSettings:
    """Resolve settings from file, then environment, then explicit overrides."""

    environ = os.environ if env is None else env
    options: dict[str, Any] = {}

    config_path = path or environ.get(CONFIG_ENV)
    if config_path:
        source = Path(config_path).expanduser()
        try:
            data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"failed to read settings from {source}: {exc}") from exc
        if not isinstance(data, Mapping):
            raise ConfigError(f"settings file {source} must contain a mapping")
        options.update(_flatten_file(data))

    for env_key, field_name in _ENV_FIELDS.items():
        if environ.get(env_key):
            options[field_name] = environ[env_key]

    options.update({k: v for k, v in overrides.items() if v is not None})
    return HarvesterSettings.from_options(options)


__all__ = ["CONFIG_ENV", "HarvesterSettings", "load_settings"]
