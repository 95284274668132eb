"""Multi-pass evidence merging into per-entity accumulators.

Pass order is fixed and meaningful:
1) supplier profiles seed identity, roles, risk and route families
2) money records attach to suppliers (by supplier id, else by key)
3) site entity links and prime providers bind sites
4) supplier-declared site ids backfill bindings
5) integrity signals propagate from bound sites

Scalar identity fields are first-writer-wins. The only permitted rewrite is an
auto-generated ``entity-...`` id being replaced by a supplier id observed later.
Collection fields (roles, route families, links, notes, bindings) only grow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from estatetrail.domain.model import ROLE_PRIME_PROVIDER, SourceLink, SourceLinkKind

from .normalize import entity_key, slugify

if TYPE_CHECKING:
    from collections.abc import Iterable

    from estatetrail.domain.model import (
        MoneyLedger,
        MoneyRecord,
        Site,
        SiteLedger,
        SupplierProfile,
    )


log = logging.getLogger(__name__)

AUTO_ID_PREFIX: Final[str] = "entity-"
UNNAMED_SUPPLIER: Final[str] = "Unnamed supplier"

RISK_PRIORITY: Final[dict[str, int]] = {
    "high": 4,
    "elevated": 3,
    "medium": 2,
    "warning": 2,
    "low": 1,
}


def pick_risk_level(left: str | None, right: str | None) -> str | None:
    """Return the higher-priority risk level; ``left`` wins ties."""

    left_rank = RISK_PRIORITY.get(left, 0) if left else 0
    right_rank = RISK_PRIORITY.get(right, 0) if right else 0
    return right if right_rank > left_rank else left


@dataclass(slots=True)
class SiteBinding:
    """One (entity, site) pair and the roles the entity plays there."""

    site: Site
    roles: set[str] = field(default_factory=set[str])
    money_record_ids: set[str] = field(default_factory=set[str])


@dataclass(slots=True, kw_only=True)
class EntityAccumulator:
    """Mutable per-entity evidence collected across the builder passes."""

    entity_id: str
    entity_name: str
    company_number: str | None = None
    roles: set[str] = field(default_factory=set[str])
    risk_level: str | None = None
    route_families: set[str] = field(default_factory=set[str])
    supplier_ids: set[str] = field(default_factory=set[str])
    source_links: dict[tuple[str, str, str], SourceLink] = field(
        default_factory=dict["tuple[str, str, str]", "SourceLink"]
    )
    notes: set[str] = field(default_factory=set[str])
    money_records: dict[str, MoneyRecord] = field(default_factory=dict["str", "MoneyRecord"])
    site_bindings: dict[str, SiteBinding] = field(default_factory=dict["str", "SiteBinding"])
    integrity_signal_ids: set[str] = field(default_factory=set[str])

    @classmethod
    def create(
        cls,
        *,
        preferred_id: str | None,
        entity_name: str,
        company_number: str | None,
    ) -> EntityAccumulator:
        entity_id = preferred_id or f"{AUTO_ID_PREFIX}{slugify(company_number or entity_name)}"
        return cls(entity_id=entity_id, entity_name=entity_name, company_number=company_number)

    @property
    def has_auto_id(self) -> bool:
        return self.entity_id.startswith(AUTO_ID_PREFIX)

    def merge_identity(
        self,
        *,
        preferred_id: str | None,
        entity_name: str,
        company_number: str | None,
    ) -> None:
        if preferred_id and self.has_auto_id:
            log.debug("Reassigning entity id %s -> %s", self.entity_id, preferred_id)
            self.entity_id = preferred_id
        if len(entity_name) > len(self.entity_name):
            self.entity_name = entity_name
        if not self.company_number and company_number:
            self.company_number = company_number

    def add_source_link(self, *, title: str, url: str, kind: SourceLinkKind) -> None:
        link = SourceLink(title=title, url=url, kind=kind)
        self.source_links[link.dedupe_key] = link

    def add_note(self, note: str | None) -> None:
        if note and note.strip():
            self.notes.add(note)

    def bind_site(self, site: Site) -> SiteBinding:
        binding = self.site_bindings.get(site.site_id)
        if binding is None:
            binding = SiteBinding(site=site)
            self.site_bindings[site.site_id] = binding
        return binding


@dataclass(slots=True)
class ProfileBuilder:
    """Run the five builder passes over one set of ledgers.

    A builder is single-use: create one per run, call :meth:`build`, discard.
    """

    site_ledger: SiteLedger
    money_ledger: MoneyLedger
    _accumulators: dict[str, EntityAccumulator] = field(
        default_factory=dict["str", "EntityAccumulator"], repr=False
    )
    _key_by_supplier_id: dict[str, str] = field(default_factory=dict["str", "str"], repr=False)
    _site_by_id: dict[str, Site] = field(default_factory=dict["str", "Site"], repr=False)

    def __post_init__(self) -> None:
        for site in self.site_ledger.sites:
            self._site_by_id.setdefault(site.site_id, site)

    @property
    def accumulators(self) -> dict[str, EntityAccumulator]:
        return self._accumulators

    def build(self) -> dict[str, EntityAccumulator]:
        self.add_supplier_profiles(self.money_ledger.supplier_profiles)
        self.add_money_records(self.money_ledger.records)
        self.add_site_links(self.site_ledger.sites)
        self.backfill_supplier_sites(self.money_ledger.supplier_profiles)
        self.propagate_signals()
        return self._accumulators

    def ensure(
        self,
        key: str,
        *,
        preferred_id: str | None,
        entity_name: str,
        company_number: str | None,
    ) -> EntityAccumulator:
        """Create the accumulator for ``key`` or merge identity into the existing one."""

        accumulator = self._accumulators.get(key)
        if accumulator is None:
            accumulator = EntityAccumulator.create(
                preferred_id=preferred_id,
                entity_name=entity_name,
                company_number=company_number,
            )
            self._accumulators[key] = accumulator
            return accumulator
        accumulator.merge_identity(
            preferred_id=preferred_id,
            entity_name=entity_name,
            company_number=company_number,
        )
        return accumulator

    # Pass 1
    def add_supplier_profiles(self, suppliers: Iterable[SupplierProfile]) -> None:
        for supplier in suppliers:
            key = entity_key(supplier.entity_name, supplier.company_number)
            if not key:
                log.debug("Skipping supplier profile without identity: %s", supplier.supplier_id)
                continue
            accumulator = self.ensure(
                key,
                preferred_id=supplier.supplier_id or None,
                entity_name=supplier.entity_name,
                company_number=supplier.company_number,
            )
            accumulator.roles.add(supplier.entity_role)
            accumulator.risk_level = pick_risk_level(accumulator.risk_level, supplier.risk_level)
            if supplier.supplier_id:
                accumulator.supplier_ids.add(supplier.supplier_id)
            accumulator.route_families.update(supplier.route_families)
            for url in supplier.source_urls:
                accumulator.add_source_link(
                    title=f"{supplier.entity_name} supplier source",
                    url=url,
                    kind=SourceLinkKind.SUPPLIER_PROFILE,
                )
            accumulator.add_note(supplier.notes)
            if supplier.supplier_id:
                self._key_by_supplier_id[supplier.supplier_id] = key

    # Pass 2
    def add_money_records(self, records: Iterable[MoneyRecord]) -> None:
        for record in records:
            key = self._key_for_record(record)
            if not key:
                log.debug("Skipping money record without supplier identity: %s", record.record_id)
                continue
            accumulator = self.ensure(
                key,
                preferred_id=record.supplier_id,
                entity_name=record.supplier_name or UNNAMED_SUPPLIER,
                company_number=record.supplier_company_number,
            )
            accumulator.money_records.setdefault(record.record_id, record)
            if record.route_family:
                accumulator.route_families.add(record.route_family)
            if record.source_title and record.source_url:
                accumulator.add_source_link(
                    title=record.source_title,
                    url=record.source_url,
                    kind=SourceLinkKind.MONEY_ROW,
                )

    def _key_for_record(self, record: MoneyRecord) -> str:
        if record.supplier_id:
            key = self._key_by_supplier_id.get(record.supplier_id)
            if key:
                return key
        return entity_key(record.supplier_name, record.supplier_company_number)

    # Pass 3
    def add_site_links(self, sites: Iterable[Site]) -> None:
        for site in sites:
            for link in site.entity_links:
                key = entity_key(link.entity_name, link.company_number)
                if not key:
                    log.debug("Skipping unnamed entity link on site %s", site.site_id)
                    continue
                accumulator = self.ensure(
                    key,
                    preferred_id=None,
                    entity_name=link.entity_name,
                    company_number=link.company_number,
                )
                accumulator.bind_site(site).roles.add(link.link_role)
                accumulator.add_note(link.notes)
                for source in link.sources:
                    accumulator.add_source_link(
                        title=source.title,
                        url=source.url,
                        kind=SourceLinkKind.HOTEL_LINK,
                    )
                if site.source_title and site.source_url:
                    accumulator.add_source_link(
                        title=site.source_title,
                        url=site.source_url,
                        kind=SourceLinkKind.HOTEL_SITE,
                    )

            provider = site.prime_provider
            if provider is None:
                continue
            key = entity_key(provider.provider, None)
            if not key:
                log.debug("Skipping unnamed prime provider on site %s", site.site_id)
                continue
            accumulator = self.ensure(
                key,
                preferred_id=None,
                entity_name=provider.provider,
                company_number=None,
            )
            accumulator.bind_site(site).roles.add(ROLE_PRIME_PROVIDER)
            accumulator.add_note(provider.note)
            accumulator.add_source_link(
                title=f"{provider.provider} prime-provider source",
                url=provider.source_url,
                kind=SourceLinkKind.PRIME_PROVIDER,
            )

    # Pass 4
    def backfill_supplier_sites(self, suppliers: Iterable[SupplierProfile]) -> None:
        for supplier in suppliers:
            key = self._key_by_supplier_id.get(supplier.supplier_id)
            accumulator = self._accumulators.get(key) if key else None
            if accumulator is None:
                continue
            for site_id in supplier.site_ids:
                site = self._site_by_id.get(site_id)
                if site is None:
                    log.debug(
                        "Supplier %s lists unknown site id %s", supplier.supplier_id, site_id
                    )
                    continue
                accumulator.bind_site(site).roles.add(supplier.entity_role)

    # Pass 5
    def propagate_signals(self) -> None:
        for accumulator in self._accumulators.values():
            for record in accumulator.money_records.values():
                for site_id in record.site_ids:
                    binding = accumulator.site_bindings.get(site_id)
                    if binding is not None:
                        binding.money_record_ids.add(record.record_id)
            for binding in accumulator.site_bindings.values():
                accumulator.integrity_signal_ids.update(
                    signal.signal_id for signal in binding.site.integrity_signals
                )


def build_accumulators(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
) -> dict[str, EntityAccumulator]:
    """Run every builder pass and return accumulators keyed by entity key."""

    return ProfileBuilder(site_ledger, money_ledger).build()
