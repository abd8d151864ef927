"""Vendor plugins and the registry that selects them."""

from typing import TYPE_CHECKING, Any

from .base import ProviderContext, VendorPlugin
from .registry import (
    ProviderEntry,
    ProviderInfo,
    ProviderRegistry,
    default_registry,
)

if TYPE_CHECKING:
    from .liberica.provider import LibericaProvider
    from .liberica_nik.provider import LibericaNikProvider
    from .microsoft.provider import MicrosoftProvider
    from .oracle.provider import OracleProvider
    from .zulu.provider import ZuluProvider

_LAZY = {
    "LibericaProvider": ".liberica.provider",
    "LibericaNikProvider": ".liberica_nik.provider",
    "MicrosoftProvider": ".microsoft.provider",
    "OracleProvider": ".oracle.provider",
    "ZuluProvider": ".zulu.provider",
}


def __getattr__(name: str) -> Any:
    if name in _LAZY:
        from importlib import import_module

        return getattr(import_module(_LAZY[name], __name__), name)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY))


__all__ = [
    "ProviderContext",
    "ProviderEntry",
    "ProviderInfo",
    "ProviderRegistry",
    "VendorPlugin",
    "default_registry",
    "LibericaNikProvider",
    "LibericaProvider",
    "MicrosoftProvider",
    "OracleProvider",
    "ZuluProvider",
]
