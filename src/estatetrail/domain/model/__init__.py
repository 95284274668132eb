"""Public domain model surface."""

from __future__ import annotations

from estatetrail.domain.model.enums import (
    RECORD_TYPE_PRIME_CONTRACT,
    ROLE_OTHER,
    ROLE_PRIME_PROVIDER,
    ROUTE_ASYLUM_SUPPORT,
    EntityCoverage,
    MoneyMatchType,
    SiteStatus,
    SourceLinkKind,
    TimelineEventKind,
    TrailKind,
)
from estatetrail.domain.model.ledgers import (
    EntityLink,
    IntegritySignal,
    LinkedSite,
    MoneyLedger,
    MoneyRecord,
    PlaceArea,
    PlaceIndex,
    PlaceLedger,
    PrimeProvider,
    Site,
    SiteLedger,
    SiteLedgerArea,
    SourceRef,
    SupplierProfile,
)
from estatetrail.domain.model.profiles import (
    EntityProfile,
    EntityProfileArea,
    EntityProfileSite,
    SourceLink,
)

__all__ = [  # noqa: RUF022
    # enums and vocabulary
    "RECORD_TYPE_PRIME_CONTRACT",
    "ROLE_OTHER",
    "ROLE_PRIME_PROVIDER",
    "ROUTE_ASYLUM_SUPPORT",
    "EntityCoverage",
    "MoneyMatchType",
    "SiteStatus",
    "SourceLinkKind",
    "TimelineEventKind",
    "TrailKind",
    # ledgers
    "EntityLink",
    "IntegritySignal",
    "LinkedSite",
    "MoneyLedger",
    "MoneyRecord",
    "PlaceArea",
    "PlaceIndex",
    "PlaceLedger",
    "PrimeProvider",
    "Site",
    "SiteLedger",
    "SiteLedgerArea",
    "SourceRef",
    "SupplierProfile",
    # profiles
    "EntityProfile",
    "EntityProfileArea",
    "EntityProfileSite",
    "SourceLink",
]
