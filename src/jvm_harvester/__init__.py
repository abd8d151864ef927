"""JVM Harvester primary package."""

from . import (
    canonicalizer,
    errors,
    log_utils,
    models,
    providers,
    registry,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "canonicalizer",
    "errors",
    "log_utils",
    "models",
    "providers",
    "registry",
]
