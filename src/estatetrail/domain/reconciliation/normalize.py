"""Deterministic name and key normalization.

Responsibilities of this module:
- derive entity keys from a company number (preferred) or a normalized name
- provide the substring name match used by trail matching
- map role and route-family codes to display labels

Identity is exact on the derived key. There is no phonetic or edit-distance
matching anywhere in the engine.
"""

from __future__ import annotations

import re
from typing import Final

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

ROLE_PRIORITY: Final[dict[str, int]] = {
    "prime_provider": 100,
    "owner_group": 90,
    "freeholder": 85,
    "brand_operator": 80,
    "operator": 75,
    "hotel_operator": 70,
    "public_body": 40,
}

_ROLE_LABELS: Final[dict[str, str]] = {
    "prime_provider": "Prime provider",
    "owner_group": "Owner group",
    "freeholder": "Freeholder",
    "brand_operator": "Brand operator",
    "operator": "Operator",
    "hotel_operator": "Hotel operator",
    "public_body": "Public body",
}

_ROUTE_FAMILY_LABELS: Final[dict[str, str]] = {
    "asylum_support": "Asylum support",
    "homes_for_ukraine": "Homes for Ukraine",
    "uk_resettlement_scheme": "UK Resettlement Scheme",
    "afghan_resettlement_programme": "Afghan Resettlement Programme",
    "not_route_specific": "Not route-specific",
}


def slugify(name: str | None) -> str:
    """Lowercase ``name`` and collapse every non-alphanumeric run into ``-``."""

    return _NON_ALNUM.sub("-", (name or "").strip().lower()).strip("-")


def normalize_name(name: str | None) -> str:
    """Lowercase ``name`` and collapse every non-alphanumeric run into one space."""

    return _NON_ALNUM.sub(" ", (name or "").lower()).strip()


def entity_key(name: str | None, company_number: str | None) -> str:
    """Return the identity key for an organisation.

    A non-blank company number always wins over the name. An empty string
    means the row carries no usable identity.
    """

    if company_number and company_number.strip():
        return company_number.strip().lower()
    return normalize_name(name)


def names_match(left: str | None, right: str | None) -> bool:
    normalized_left = normalize_name(left)
    normalized_right = normalize_name(right)
    if not normalized_left or not normalized_right:
        return False
    return (
        normalized_left == normalized_right
        or normalized_right in normalized_left
        or normalized_left in normalized_right
    )


def role_priority(role: str) -> int:
    return ROLE_PRIORITY.get(role, 0)


def sort_roles(roles: set[str] | frozenset[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Order roles by priority, highest first, then alphabetically."""

    return tuple(sorted(roles, key=lambda role: (-role_priority(role), role)))


def format_role_label(role: str) -> str:
    return _ROLE_LABELS.get(role, role.replace("_", " "))


def format_route_family_label(route_family: str) -> str:
    return _ROUTE_FAMILY_LABELS.get(route_family, route_family)
