"""Canonical ledger records consumed by the reconciliation core.

Records are frozen and hold tuples only, so a whole ledger is hashable. The
profile cache relies on that to fingerprint its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import EntityCoverage, SiteStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceRef:
    title: str
    url: str


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityLink:
    """One site-level claim that an organisation owns or runs a site."""

    entity_name: str
    link_role: str
    company_number: str | None = None
    confidence: str = "low"
    sources: tuple[SourceRef, ...] = ()
    notes: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class IntegritySignal:
    signal_id: str
    signal_type: str = ""
    severity: str = ""
    headline: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PrimeProvider:
    provider: str
    source_url: str
    regions: tuple[str, ...] = ()
    note: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Site:
    site_id: str
    site_name: str
    area_name: str
    region_name: str
    country_name: str
    status: SiteStatus
    entity_coverage: EntityCoverage
    area_code: str | None = None
    confidence: str = "low"
    people_housed_reported: int | None = None
    first_public_date: str | None = None
    last_public_date: str | None = None
    source_title: str | None = None
    source_url: str | None = None
    entity_links: tuple[EntityLink, ...] = ()
    integrity_signals: tuple[IntegritySignal, ...] = ()
    prime_provider: PrimeProvider | None = None

    @property
    def is_current(self) -> bool:
        return self.status is SiteStatus.CURRENT

    @property
    def integrity_signal_count(self) -> int:
        return len(self.integrity_signals)


@dataclass(frozen=True, slots=True, kw_only=True)
class SiteLedgerArea:
    """Area row of the site ledger: named and unnamed hotel use per place."""

    area_name: str
    region_name: str
    country_name: str
    area_code: str | None = None
    current_named_site_count: int = 0
    historical_named_site_count: int = 0
    unnamed_site_count: int = 0
    people_housed_reported: int | None = None
    source_title: str = ""
    source_url: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class LinkedSite:
    site_id: str
    site_name: str
    area_name: str
    region_name: str
    entity_coverage: str


@dataclass(frozen=True, slots=True, kw_only=True)
class MoneyRecord:
    record_id: str
    record_type: str
    title: str
    buyer_name: str
    supplier_id: str | None = None
    supplier_name: str | None = None
    supplier_company_number: str | None = None
    supplier_role: str | None = None
    route_family: str | None = None
    value_gbp: float | None = None
    geography_scope: str | None = None
    award_date: str | None = None
    published_date: str | None = None
    site_ids: tuple[str, ...] = ()
    linked_sites: tuple[LinkedSite, ...] = ()
    source_title: str | None = None
    source_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SupplierProfile:
    supplier_id: str
    entity_name: str
    entity_role: str
    company_number: str | None = None
    route_families: tuple[str, ...] = ()
    site_ids: tuple[str, ...] = ()
    public_contract_count: int = 0
    public_contract_value_gbp: float | None = None
    risk_level: str | None = None
    integrity_signal_count: int = 0
    source_urls: tuple[str, ...] = ()
    notes: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaceArea:
    """Local-authority statistics from the place ledger."""

    area_code: str
    area_name: str
    region_name: str
    country_name: str
    supported_asylum: int = 0
    supported_asylum_rate: float | None = None
    contingency_accommodation: int = 0


@dataclass(frozen=True, slots=True)
class SiteLedger:
    sites: tuple[Site, ...] = ()
    areas: tuple[SiteLedgerArea, ...] = ()


@dataclass(frozen=True, slots=True)
class MoneyLedger:
    records: tuple[MoneyRecord, ...] = ()
    supplier_profiles: tuple[SupplierProfile, ...] = ()


@dataclass(frozen=True, slots=True)
class PlaceLedger:
    areas: tuple[PlaceArea, ...] = ()

    @property
    def region_names(self) -> frozenset[str]:
        return frozenset(area.region_name for area in self.areas)


@dataclass(slots=True)
class PlaceIndex:
    """Place-ledger lookup by area code, falling back to exact area name.

    When a code or name repeats, the first row wins.
    """

    by_code: dict[str, PlaceArea] = field(default_factory=dict["str", "PlaceArea"])
    by_name: dict[str, PlaceArea] = field(default_factory=dict["str", "PlaceArea"])

    @classmethod
    def from_ledger(cls, ledger: PlaceLedger) -> PlaceIndex:
        index = cls()
        for area in ledger.areas:
            index.by_code.setdefault(area.area_code, area)
            index.by_name.setdefault(area.area_name, area)
        return index

    def lookup(self, area_code: str | None, area_name: str) -> PlaceArea | None:
        if area_code and area_code in self.by_code:
            return self.by_code[area_code]
        return self.by_name.get(area_name)
