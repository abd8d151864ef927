from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from jvm_harvester.providers.base import VendorPlugin


@dataclass(frozen=True)
class ProviderInfo:
    name: str
    title: str
    description: str
    transport: str = "json"
    homepage: str | None = None


@dataclass(frozen=True)
class ProviderEntry:
    plugin: VendorPlugin
    info: ProviderInfo


class ProviderRegistry:
    """Fixed, ordered set of vendor plugins built once per run."""

    def __init__(self, entries: Iterable[ProviderEntry] = ()) -> None:
        self._providers: dict[str, ProviderEntry] = {}
        for entry in entries:
            if entry.info.name in self._providers:
                raise ValueError(f"Provider '{entry.info.name}' registered twice")
            self._providers[entry.info.name] = entry

    def get(self, name: str) -> VendorPlugin:
        return self.entry(name).plugin

    def info(self, name: str) -> ProviderInfo:
        return self.entry(name).info

    def entry(self, name: str) -> ProviderEntry:
        if name not in self._providers:
            raise KeyError(f"Provider '{name}' is not registered")
        return self._providers[name]

    def available(self) -> list[str]:
        return sorted(self._providers)

    def entries(self) -> list[ProviderEntry]:
        return [self._providers[name] for name in self.available()]

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def select(self, names: Iterable[str] | None = None) -> list[ProviderEntry]:
        """Entries named in ``names``; unknown names are skipped, none means all."""

        wanted = set(names or ())
        if not wanted:
            return self.entries()
        return [entry for entry in self.entries() if entry.info.name in wanted]


def default_registry() -> ProviderRegistry:
    """Build the registry of built-in vendors."""

    from jvm_harvester.providers.liberica.provider import LibericaProvider
    from jvm_harvester.providers.liberica_nik.provider import LibericaNikProvider
    from jvm_harvester.providers.microsoft.provider import MicrosoftProvider
    from jvm_harvester.providers.oracle.provider import OracleProvider
    from jvm_harvester.providers.zulu.provider import ZuluProvider

    return ProviderRegistry(
        [
            ProviderEntry(
                plugin=LibericaProvider(),
                info=ProviderInfo(
                    name="liberica",
                    title="BellSoft Liberica JDK",
                    description="Liberica JDK/JRE builds from the BellSoft releases API",
                    homepage="https://bell-sw.com/",
                ),
            ),
            ProviderEntry(
                plugin=LibericaNikProvider(),
                info=ProviderInfo(
                    name="liberica-nik",
                    title="BellSoft Liberica Native Image Kit",
                    description="GraalVM-based NIK core bundles from the BellSoft API",
                    homepage="https://bell-sw.com/liberica-native-image-kit/",
                ),
            ),
            ProviderEntry(
                plugin=MicrosoftProvider(),
                info=ProviderInfo(
                    name="microsoft",
                    title="Microsoft Build of OpenJDK",
                    description="Scraped from the Microsoft Learn download pages",
                    transport="html",
                    homepage="https://learn.microsoft.com/java/openjdk/",
                ),
            ),
            ProviderEntry(
                plugin=OracleProvider(),
                info=ProviderInfo(
                    name="oracle",
                    title="Oracle JDK",
                    description="Scraped from the Oracle download and archive pages",
                    transport="html",
                    homepage="https://www.oracle.com/java/",
                ),
            ),
            ProviderEntry(
                plugin=ZuluProvider(),
                info=ProviderInfo(
                    name="zulu",
                    title="Azul Zulu",
                    description="Zulu packages from the Azul metadata API",
                    homepage="https://www.azul.com/downloads/",
                ),
            ),
        ]
    )


__all__ = [
    "ProviderEntry",
    "ProviderInfo",
    "ProviderRegistry",
    "default_registry",
]
