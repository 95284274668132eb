"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SiteStatus(StrEnum):
    CURRENT = "current"
    HISTORICAL = "historical"
    OTHER = "other"


class EntityCoverage(StrEnum):
    """How completely a site's ownership/operator chain is documented."""

    UNRESOLVED = "unresolved"
    PARTIAL = "partial"
    RESOLVED = "resolved"


class SourceLinkKind(StrEnum):
    MONEY_ROW = "money_row"
    SUPPLIER_PROFILE = "supplier_profile"
    HOTEL_LINK = "hotel_link"
    HOTEL_SITE = "hotel_site"
    PRIME_PROVIDER = "prime_provider"


class MoneyMatchType(StrEnum):
    """How a site's trail found its money evidence."""

    DIRECT = "direct"
    PROVIDER = "provider"
    NONE = "none"


class TrailKind(StrEnum):
    SITE = "site"
    AREA = "area"


class TimelineEventKind(StrEnum):
    SITE_FIRST_SEEN = "site_first_seen"
    SITE_LAST_SEEN = "site_last_seen"
    MONEY_ROW = "money_row"


# Roles and route families are open vocabularies in the ledgers; these are the
# values the reconciliation rules refer to by name.
ROLE_PRIME_PROVIDER = "prime_provider"
ROLE_OTHER = "other"
ROUTE_ASYLUM_SUPPORT = "asylum_support"
RECORD_TYPE_PRIME_CONTRACT = "prime_contract_scope"
