"""Registry utilities for canonical platform vocabulary."""

from jvm_harvester.registry.registry import (
    CanonicalTerm,
    Vocabulary,
    canonical_terms,
    default_vocabulary_path,
    load_vocabulary,
    raw_key_lookup,
)

__all__ = [
    "CanonicalTerm",
    "Vocabulary",
    "canonical_terms",
    "default_vocabulary_path",
    "load_vocabulary",
    "raw_key_lookup",
]
