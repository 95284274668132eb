"""Finalized entity profiles: the output of one reconciliation run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import EntityCoverage, SiteStatus, SourceLinkKind
    from .ledgers import MoneyRecord


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceLink:
    title: str
    url: str
    kind: SourceLinkKind

    @property
    def dedupe_key(self) -> tuple[str, str, str]:
        return (str(self.kind), self.url, self.title)


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityProfileSite:
    """A site as seen from one entity, with the roles that entity plays there."""

    site_id: str
    site_name: str
    area_name: str
    area_code: str | None
    region_name: str
    country_name: str
    status: SiteStatus
    entity_coverage: EntityCoverage
    confidence: str
    people_housed_reported: int | None
    first_public_date: str | None
    last_public_date: str | None
    relationship_roles: tuple[str, ...]
    relationship_labels: tuple[str, ...]
    money_record_count: int
    integrity_signal_count: int


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityProfileArea:
    area_name: str
    area_code: str | None
    region_name: str
    country_name: str
    supported_asylum: int | None
    supported_asylum_rate: float | None
    contingency_accommodation: int | None
    current_site_count: int
    historical_site_count: int
    site_names: tuple[str, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityProfile:
    entity_id: str
    entity_name: str
    company_number: str | None
    primary_role: str
    primary_role_label: str
    roles: tuple[str, ...]
    role_labels: tuple[str, ...]
    role_summary: str
    risk_level: str | None
    route_families: tuple[str, ...]
    supplier_ids: tuple[str, ...]
    public_contract_count: int
    public_contract_value_gbp: float | None
    money_record_count: int
    money_rows_with_published_value_count: int
    current_site_count: int
    historical_site_count: int
    unresolved_current_site_count: int
    integrity_signal_count: int
    linked_area_count: int
    site_ids: tuple[str, ...]
    linked_areas: tuple[EntityProfileArea, ...]
    current_sites: tuple[EntityProfileSite, ...]
    historical_sites: tuple[EntityProfileSite, ...]
    money_records: tuple[MoneyRecord, ...]
    source_links: tuple[SourceLink, ...]
    notes: tuple[str, ...]
    search_description: str
    score: int

    @property
    def all_sites(self) -> tuple[EntityProfileSite, ...]:
        return self.current_sites + self.historical_sites

    def has_money_record(self, record_id: str) -> bool:
        return any(record.record_id == record_id for record in self.money_records)
