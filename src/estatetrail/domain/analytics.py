"""Read-only views derived from a finalized entity profile.

Every function here is pure: it reads a profile (and, where needed, the place
and site ledgers) and returns fresh frozen rows. Nothing is cached.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from estatetrail.domain.model import (
    RECORD_TYPE_PRIME_CONTRACT,
    ROLE_PRIME_PROVIDER,
    EntityCoverage,
    TimelineEventKind,
)
from estatetrail.domain.reconciliation.finalize import area_sort_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from estatetrail.domain.model import (
        EntityProfile,
        EntityProfileArea,
        PlaceArea,
        PlaceLedger,
        SiteLedgerArea,
    )


_SCOPE_DELIMITER = re.compile(r"[|;]")

COVERAGE_SYNONYMS: Final[dict[str, tuple[str, ...]]] = {
    "Midlands": ("East Midlands", "West Midlands"),
    "South of England": ("London", "South East", "South West"),
}


def to_share_pct(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(count / total * 100, 1)


def sum_optional(values: Iterable[int | float | None]) -> int | float | None:
    """Sum the present values; ``None`` when there are none."""

    present = [value for value in values if value is not None]
    if not present:
        return None
    return sum(present)


# Exposure


@dataclass(frozen=True, slots=True, kw_only=True)
class CoverageRow:
    coverage: EntityCoverage
    label: str
    count: int
    share_pct: float


@dataclass(frozen=True, slots=True, kw_only=True)
class ExposureSummary:
    current_site_count: int
    unresolved_current_site_count: int
    partial_current_site_count: int
    resolved_current_site_count: int
    non_resolved_current_site_count: int
    non_resolved_share_pct: float
    linked_area_count: int
    total_supported_asylum_across_linked_areas: int | float | None
    total_contingency_across_linked_areas: int | float | None
    lead_area: EntityProfileArea | None
    coverage_rows: tuple[CoverageRow, ...]


def exposure_summary(profile: EntityProfile) -> ExposureSummary:
    """Break down current sites by how well their ownership chain is documented."""

    current = profile.current_sites
    total = len(current)
    counts = {
        coverage: sum(1 for site in current if site.entity_coverage == coverage)
        for coverage in EntityCoverage
    }
    non_resolved = counts[EntityCoverage.UNRESOLVED] + counts[EntityCoverage.PARTIAL]
    ranked_areas = sorted(profile.linked_areas, key=area_sort_key)

    return ExposureSummary(
        current_site_count=total,
        unresolved_current_site_count=counts[EntityCoverage.UNRESOLVED],
        partial_current_site_count=counts[EntityCoverage.PARTIAL],
        resolved_current_site_count=counts[EntityCoverage.RESOLVED],
        non_resolved_current_site_count=non_resolved,
        non_resolved_share_pct=to_share_pct(non_resolved, total),
        linked_area_count=len(profile.linked_areas),
        total_supported_asylum_across_linked_areas=sum_optional(
            area.supported_asylum for area in profile.linked_areas
        ),
        total_contingency_across_linked_areas=sum_optional(
            area.contingency_accommodation for area in profile.linked_areas
        ),
        lead_area=ranked_areas[0] if ranked_areas else None,
        coverage_rows=tuple(
            CoverageRow(
                coverage=coverage,
                label=coverage.value.capitalize(),
                count=counts[coverage],
                share_pct=to_share_pct(counts[coverage], total),
            )
            for coverage in EntityCoverage
        ),
    )


# Regional spread


@dataclass(frozen=True, slots=True, kw_only=True)
class RegionSpreadRow:
    region_name: str
    country_name: str
    current_site_count: int
    historical_site_count: int
    linked_area_count: int
    non_resolved_current_site_count: int
    supported_asylum_total: int | float | None
    contingency_accommodation_total: int | float | None
    area_names: tuple[str, ...]
    site_names: tuple[str, ...]


@dataclass(slots=True)
class _RegionDraft:
    region_name: str
    country_name: str
    current_site_count: int = 0
    historical_site_count: int = 0
    linked_area_count: int = 0
    non_resolved_current_site_count: int = 0
    supported_asylum: list[int | None] = field(default_factory=list["int | None"])
    contingency: list[int | None] = field(default_factory=list["int | None"])
    area_names: set[str] = field(default_factory=set[str])
    site_names: set[str] = field(default_factory=set[str])

    def freeze(self) -> RegionSpreadRow:
        return RegionSpreadRow(
            region_name=self.region_name,
            country_name=self.country_name,
            current_site_count=self.current_site_count,
            historical_site_count=self.historical_site_count,
            linked_area_count=self.linked_area_count,
            non_resolved_current_site_count=self.non_resolved_current_site_count,
            supported_asylum_total=sum_optional(self.supported_asylum),
            contingency_accommodation_total=sum_optional(self.contingency),
            area_names=tuple(sorted(self.area_names)),
            site_names=tuple(sorted(self.site_names)),
        )


def region_spread(profile: EntityProfile) -> tuple[RegionSpreadRow, ...]:
    """Group an entity's sites and linked areas by (region, country)."""

    drafts: dict[tuple[str, str], _RegionDraft] = {}

    def draft_for(region_name: str, country_name: str) -> _RegionDraft:
        key = (region_name, country_name)
        if key not in drafts:
            drafts[key] = _RegionDraft(region_name=region_name, country_name=country_name)
        return drafts[key]

    for site in profile.current_sites:
        draft = draft_for(site.region_name, site.country_name)
        draft.current_site_count += 1
        if site.entity_coverage != EntityCoverage.RESOLVED:
            draft.non_resolved_current_site_count += 1
        draft.site_names.add(site.site_name)

    for site in profile.historical_sites:
        draft = draft_for(site.region_name, site.country_name)
        draft.historical_site_count += 1
        draft.site_names.add(site.site_name)

    for area in profile.linked_areas:
        draft = draft_for(area.region_name, area.country_name)
        draft.linked_area_count += 1
        draft.area_names.add(area.area_name)
        draft.supported_asylum.append(area.supported_asylum)
        draft.contingency.append(area.contingency_accommodation)

    rows = [draft.freeze() for draft in drafts.values()]
    rows.sort(
        key=lambda row: (
            -row.current_site_count,
            -row.non_resolved_current_site_count,
            -(row.supported_asylum_total if row.supported_asylum_total is not None else -1),
            row.region_name,
            row.country_name,
        )
    )
    return tuple(rows)


# Linked places


@dataclass(frozen=True, slots=True, kw_only=True)
class LinkedPlaceRanking:
    rank: int
    area: EntityProfileArea
    site_label: str


def linked_place_rankings(profile: EntityProfile, limit: int = 5) -> tuple[LinkedPlaceRanking, ...]:
    ranked = sorted(profile.linked_areas, key=area_sort_key)[: max(limit, 0)]
    return tuple(
        LinkedPlaceRanking(rank=index, area=area, site_label=_site_label(area))
        for index, area in enumerate(ranked, start=1)
    )


def _site_label(area: EntityProfileArea) -> str:
    if area.current_site_count > 0:
        count, kind = area.current_site_count, "current"
    else:
        count, kind = area.historical_site_count, "historical"
    return f"{count} {kind} site{'' if count == 1 else 's'}"


# Timeline


@dataclass(frozen=True, slots=True, kw_only=True)
class TimelineEvent:
    kind: TimelineEventKind
    date: str
    title: str
    detail: str
    site_id: str | None = None
    record_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityTimeline:
    events: tuple[TimelineEvent, ...]
    first_evidence_date: str | None
    latest_evidence_date: str | None
    first_current_site_date: str | None
    latest_money_date: str | None

    @property
    def event_count(self) -> int:
        return len(self.events)


def entity_timeline(profile: EntityProfile) -> EntityTimeline:
    """Collect dated site and money evidence, newest first.

    A "last publicly visible" event is only emitted for sites that are no
    longer current and whose last date differs from their first date. A money
    row is dated by its publication date, else its award date.
    """

    events: list[TimelineEvent] = []
    for site in profile.all_sites:
        if site.first_public_date:
            events.append(
                TimelineEvent(
                    kind=TimelineEventKind.SITE_FIRST_SEEN,
                    date=site.first_public_date,
                    title=f"{site.site_name} first publicly named",
                    detail=f"{site.area_name}, {site.region_name}",
                    site_id=site.site_id,
                )
            )
        if (
            site.last_public_date
            and site.status != "current"
            and site.last_public_date != site.first_public_date
        ):
            events.append(
                TimelineEvent(
                    kind=TimelineEventKind.SITE_LAST_SEEN,
                    date=site.last_public_date,
                    title=f"{site.site_name} last publicly visible",
                    detail=f"{site.area_name}, {site.region_name}",
                    site_id=site.site_id,
                )
            )

    for record in profile.money_records:
        date = record.published_date or record.award_date
        if not date:
            continue
        events.append(
            TimelineEvent(
                kind=TimelineEventKind.MONEY_ROW,
                date=date,
                title=record.title,
                detail=record.buyer_name,
                record_id=record.record_id,
            )
        )

    # Two stable sorts: title ascending, then date descending.
    events.sort(key=lambda event: event.title)
    events.sort(key=lambda event: event.date, reverse=True)
    dates = [event.date for event in events]
    current_dates = [
        site.first_public_date for site in profile.current_sites if site.first_public_date
    ]
    money_dates = [event.date for event in events if event.kind is TimelineEventKind.MONEY_ROW]
    return EntityTimeline(
        events=tuple(events),
        first_evidence_date=min(dates, default=None),
        latest_evidence_date=max(dates, default=None),
        first_current_site_date=min(current_dates, default=None),
        latest_money_date=max(money_dates, default=None),
    )


# Regional contract coverage


@dataclass(frozen=True, slots=True, kw_only=True)
class CoveredArea:
    area_code: str
    area_name: str
    region_name: str
    supported_asylum: int
    supported_asylum_rate: float | None
    contingency_accommodation: int
    current_named_site_count: int
    directly_linked: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class RegionalContractCoverage:
    entity_id: str
    geography_labels: tuple[str, ...]
    covered_regions: tuple[str, ...]
    covered_area_count: int
    direct_linked_area_count: int
    named_site_area_count: int
    supported_asylum_total: int
    contingency_accommodation_total: int
    top_covered_areas: tuple[CoveredArea, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class AreaProviderCoverage:
    profile: EntityProfile
    coverage: RegionalContractCoverage
    covered_area: CoveredArea


def parse_geography_scope(scope: str | None) -> tuple[str, ...]:
    """Split a pipe/semicolon delimited scope into distinct labels, in order."""

    labels: list[str] = []
    for part in _SCOPE_DELIMITER.split(scope or ""):
        label = part.strip()
        if label and label not in labels:
            labels.append(label)
    return tuple(labels)


def expand_coverage_labels(labels: Iterable[str]) -> frozenset[str]:
    expanded: set[str] = set()
    for label in labels:
        expanded.update(COVERAGE_SYNONYMS.get(label, (label,)))
    return frozenset(expanded)


def contract_geography_labels(profile: EntityProfile) -> tuple[str, ...]:
    """Distinct coverage labels across a prime provider's contract rows."""

    if profile.primary_role != ROLE_PRIME_PROVIDER:
        return ()
    labels: list[str] = []
    for record in profile.money_records:
        if record.record_type != RECORD_TYPE_PRIME_CONTRACT:
            continue
        for label in parse_geography_scope(record.geography_scope):
            if label not in labels:
                labels.append(label)
    return tuple(labels)


def covered_area_sort_key(area: CoveredArea) -> tuple[int, int, float, str]:
    return (
        -area.supported_asylum,
        -area.contingency_accommodation,
        -(area.supported_asylum_rate if area.supported_asylum_rate is not None else -1.0),
        area.area_name,
    )


def regional_contract_coverage(
    profile: EntityProfile,
    places: PlaceLedger,
    site_areas: Iterable[SiteLedgerArea] = (),
    limit: int = 5,
) -> RegionalContractCoverage | None:
    """Map a prime provider's regional contracts onto place-ledger areas.

    Returns ``None`` for profiles that are not prime providers or whose
    contract rows name no region known to the place ledger.
    """

    labels = contract_geography_labels(profile)
    if not labels:
        return None
    regions = expand_coverage_labels(labels) & places.region_names
    if not regions:
        return None

    named_counts = _named_site_counts(site_areas)
    linked_codes = {area.area_code for area in profile.linked_areas if area.area_code}
    linked_names = {area.area_name for area in profile.linked_areas}
    covered = sorted(
        (
            _covered_area(
                area,
                named_counts=named_counts,
                directly_linked=area.area_code in linked_codes or area.area_name in linked_names,
            )
            for area in places.areas
            if area.region_name in regions
        ),
        key=covered_area_sort_key,
    )

    return RegionalContractCoverage(
        entity_id=profile.entity_id,
        geography_labels=labels,
        covered_regions=tuple(sorted(regions)),
        covered_area_count=len(covered),
        direct_linked_area_count=sum(1 for area in covered if area.directly_linked),
        named_site_area_count=sum(1 for area in covered if area.current_named_site_count > 0),
        supported_asylum_total=sum(area.supported_asylum for area in covered),
        contingency_accommodation_total=sum(area.contingency_accommodation for area in covered),
        top_covered_areas=tuple(covered[: max(limit, 0)]),
    )


def area_prime_provider_coverage(
    area: PlaceArea,
    profiles: Iterable[EntityProfile],
    places: PlaceLedger,
    site_areas: Iterable[SiteLedgerArea] = (),
) -> AreaProviderCoverage | None:
    """Find the prime provider whose regional contract covers ``area``.

    When several do, the higher-scoring profile wins, then the name.
    """

    site_area_rows = tuple(site_areas)
    candidates: list[AreaProviderCoverage] = []
    for profile in profiles:
        coverage = regional_contract_coverage(profile, places, site_area_rows, limit=0)
        if coverage is None or area.region_name not in coverage.covered_regions:
            continue
        linked = any(
            linked_area.area_code == area.area_code or linked_area.area_name == area.area_name
            for linked_area in profile.linked_areas
        )
        candidates.append(
            AreaProviderCoverage(
                profile=profile,
                coverage=coverage,
                covered_area=_covered_area(
                    area,
                    named_counts=_named_site_counts(site_area_rows),
                    directly_linked=linked,
                ),
            )
        )
    candidates.sort(key=lambda candidate: (-candidate.profile.score, candidate.profile.entity_name))
    return candidates[0] if candidates else None


def _named_site_counts(site_areas: Iterable[SiteLedgerArea]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for site_area in site_areas:
        for key in (site_area.area_code, site_area.area_name):
            if key:
                counts.setdefault(key, site_area.current_named_site_count)
    return counts


def _covered_area(
    area: PlaceArea,
    *,
    named_counts: dict[str, int],
    directly_linked: bool,
) -> CoveredArea:
    return CoveredArea(
        area_code=area.area_code,
        area_name=area.area_name,
        region_name=area.region_name,
        supported_asylum=area.supported_asylum,
        supported_asylum_rate=area.supported_asylum_rate,
        contingency_accommodation=area.contingency_accommodation,
        current_named_site_count=named_counts.get(
            area.area_code, named_counts.get(area.area_name, 0)
        ),
        directly_linked=directly_linked,
    )
