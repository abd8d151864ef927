from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from jvm_harvester.http import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT
from jvm_harvester.models import JvmRecord


@dataclass
class ProviderContext:
    name: str
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def timeout(self) -> float:
        return float(self.options.get("http_timeout") or DEFAULT_TIMEOUT_S)

    @property
    def user_agent(self) -> str:
        return str(self.options.get("user_agent") or DEFAULT_USER_AGENT)

    def http_kwargs(self) -> dict[str, Any]:
        return {
            "timeout": self.timeout,
            "user_agent": self.user_agent,
            "vendor": self.name,
        }


class VendorPlugin(Protocol):
    name: str

    def fetch(self, ctx: ProviderContext) -> set[JvmRecord]: ...


__all__ = ["ProviderContext", "VendorPlugin"]
