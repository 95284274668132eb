"""Reconciliation core: ledgers in, entity profiles out.

Layered flow:
1) normalize names and company numbers into entity keys
2) merge supplier, money and site evidence into accumulators (fixed pass order)
3) finalize accumulators into immutable, ranked profiles
"""

from __future__ import annotations

from .builder import EntityAccumulator, ProfileBuilder, SiteBinding, build_accumulators
from .engine import ProfileCache, build_entity_profiles, get_entity_profile
from .finalize import finalize_profile, finalize_profiles
from .normalize import entity_key, names_match, normalize_name, slugify

__all__ = [
    "EntityAccumulator",
    "ProfileBuilder",
    "ProfileCache",
    "SiteBinding",
    "build_accumulators",
    "build_entity_profiles",
    "entity_key",
    "finalize_profile",
    "finalize_profiles",
    "get_entity_profile",
    "names_match",
    "normalize_name",
    "slugify",
]
