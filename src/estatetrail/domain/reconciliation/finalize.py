"""Turn builder accumulators into immutable, ranked entity profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from estatetrail.domain.model import (
    ROLE_OTHER,
    EntityCoverage,
    EntityProfile,
    EntityProfileArea,
    EntityProfileSite,
    PlaceIndex,
)

from .normalize import format_role_label, format_route_family_label, sort_roles

if TYPE_CHECKING:
    from collections.abc import Iterable

    from estatetrail.domain.model import MoneyRecord, PlaceArea, PlaceLedger, SourceLink

    from .builder import EntityAccumulator, SiteBinding


SCORE_PER_CURRENT_SITE = 180
SCORE_PER_MONEY_RECORD = 50
SCORE_PER_INTEGRITY_SIGNAL = 30
SCORE_PER_LINKED_AREA = 20
SCORE_PER_UNRESOLVED_CURRENT_SITE = 40


def finalize_profiles(
    accumulators: Iterable[EntityAccumulator],
    places: PlaceLedger,
) -> tuple[EntityProfile, ...]:
    """Finalize every accumulator and rank by score desc, then name."""

    index = PlaceIndex.from_ledger(places)
    profiles = [finalize_profile(accumulator, index) for accumulator in accumulators]
    profiles.sort(key=lambda profile: (-profile.score, profile.entity_name))
    return tuple(profiles)


def finalize_profile(accumulator: EntityAccumulator, places: PlaceIndex) -> EntityProfile:
    roles = sort_roles(accumulator.roles)
    role_labels = tuple(format_role_label(role) for role in roles)
    primary_role = roles[0] if roles else ROLE_OTHER

    sites = sorted(
        (_profile_site(binding) for binding in accumulator.site_bindings.values()),
        key=_site_sort_key,
    )
    current_sites = tuple(site for site in sites if site.status == "current")
    historical_sites = tuple(site for site in sites if site.status != "current")
    linked_areas = linked_areas_for(current_sites, places)

    money_records = tuple(sorted(accumulator.money_records.values(), key=_money_sort_key))
    unresolved_current = sum(
        1 for site in current_sites if site.entity_coverage is not EntityCoverage.RESOLVED
    )
    signal_count = len(accumulator.integrity_signal_ids)
    score = (
        len(current_sites) * SCORE_PER_CURRENT_SITE
        + len(money_records) * SCORE_PER_MONEY_RECORD
        + signal_count * SCORE_PER_INTEGRITY_SIGNAL
        + len(linked_areas) * SCORE_PER_LINKED_AREA
        + unresolved_current * SCORE_PER_UNRESOLVED_CURRENT_SITE
    )
    route_families = tuple(
        sorted(
            accumulator.route_families,
            key=lambda route: (format_route_family_label(route), route),
        )
    )
    primary_role_label = format_role_label(primary_role)

    return EntityProfile(
        entity_id=accumulator.entity_id,
        entity_name=accumulator.entity_name,
        company_number=accumulator.company_number,
        primary_role=primary_role,
        primary_role_label=primary_role_label,
        roles=roles,
        role_labels=role_labels,
        role_summary=build_role_summary(role_labels),
        risk_level=accumulator.risk_level,
        route_families=route_families,
        supplier_ids=tuple(sorted(accumulator.supplier_ids)),
        public_contract_count=len(money_records),
        public_contract_value_gbp=sum_disclosed_values(money_records),
        money_record_count=len(money_records),
        money_rows_with_published_value_count=sum(
            1 for record in money_records if record.value_gbp is not None
        ),
        current_site_count=len(current_sites),
        historical_site_count=len(historical_sites),
        unresolved_current_site_count=unresolved_current,
        integrity_signal_count=signal_count,
        linked_area_count=len(linked_areas),
        site_ids=tuple(site.site_id for site in sites),
        linked_areas=linked_areas,
        current_sites=current_sites,
        historical_sites=historical_sites,
        money_records=money_records,
        source_links=_sorted_source_links(accumulator.source_links.values()),
        notes=tuple(sorted(accumulator.notes)),
        search_description=build_search_description(
            primary_role_label=primary_role_label,
            current_site_count=len(current_sites),
            money_record_count=len(money_records),
            unresolved_current_site_count=unresolved_current,
            linked_area_count=len(linked_areas),
            route_family_count=len(route_families),
        ),
        score=score,
    )


def sum_disclosed_values(records: Iterable[MoneyRecord]) -> float | None:
    """Sum disclosed values; ``None`` when no record discloses one."""

    total: float | None = None
    for record in records:
        if record.value_gbp is None:
            continue
        total = (total or 0) + record.value_gbp
    return total


def area_sort_key(area: EntityProfileArea) -> tuple[int, int, int, str]:
    """Rank areas by local pressure, then by how many sites sit there."""

    return (
        -(area.supported_asylum if area.supported_asylum is not None else -1),
        -(area.contingency_accommodation if area.contingency_accommodation is not None else -1),
        -area.current_site_count,
        area.area_name,
    )


@dataclass(slots=True)
class _AreaDraft:
    site: EntityProfileSite
    place: PlaceArea | None
    current_site_count: int = 0
    historical_site_count: int = 0
    site_names: list[str] = field(default_factory=list[str])

    def add(self, site: EntityProfileSite) -> None:
        if site.status == "current":
            self.current_site_count += 1
        else:
            self.historical_site_count += 1
        self.site_names.append(site.site_name)

    def freeze(self) -> EntityProfileArea:
        place = self.place
        return EntityProfileArea(
            area_name=self.site.area_name,
            area_code=self.site.area_code,
            region_name=self.site.region_name,
            country_name=self.site.country_name,
            supported_asylum=place.supported_asylum if place else None,
            supported_asylum_rate=place.supported_asylum_rate if place else None,
            contingency_accommodation=place.contingency_accommodation if place else None,
            current_site_count=self.current_site_count,
            historical_site_count=self.historical_site_count,
            site_names=tuple(self.site_names),
        )


def linked_areas_for(
    sites: Iterable[EntityProfileSite],
    places: PlaceIndex,
) -> tuple[EntityProfileArea, ...]:
    """Group sites by area code (or name) and attach place statistics."""

    drafts: dict[str, _AreaDraft] = {}
    for site in sites:
        area_key = site.area_code or site.area_name
        draft = drafts.get(area_key)
        if draft is None:
            draft = _AreaDraft(site=site, place=places.lookup(site.area_code, site.area_name))
            drafts[area_key] = draft
        draft.add(site)
    return tuple(sorted((draft.freeze() for draft in drafts.values()), key=area_sort_key))


def build_role_summary(role_labels: tuple[str, ...]) -> str:
    if len(role_labels) <= 2:
        return " / ".join(role_labels)
    return f"{' / '.join(role_labels[:2])} / {len(role_labels) - 2} more"


def build_search_description(
    *,
    primary_role_label: str,
    current_site_count: int,
    money_record_count: int,
    unresolved_current_site_count: int,
    linked_area_count: int,
    route_family_count: int,
) -> str:
    sites = _plural(current_site_count, "current named site")
    if current_site_count > 0 and money_record_count > 0:
        return (
            f"{primary_role_label} with {sites}, "
            f"{_plural(money_record_count, 'public money row')}, and "
            f"{_plural(unresolved_current_site_count, 'current chain gap')}."
        )
    if current_site_count > 0:
        return (
            f"{primary_role_label} linked to {sites} across "
            f"{_plural(linked_area_count, 'place')}."
        )
    families = "family" if route_family_count == 1 else "families"
    return (
        f"{primary_role_label} with {_plural(money_record_count, 'public money row')} "
        f"across {route_family_count} route {families}."
    )


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _profile_site(binding: SiteBinding) -> EntityProfileSite:
    site = binding.site
    roles = sort_roles(binding.roles)
    return EntityProfileSite(
        site_id=site.site_id,
        site_name=site.site_name,
        area_name=site.area_name,
        area_code=site.area_code,
        region_name=site.region_name,
        country_name=site.country_name,
        status=site.status,
        entity_coverage=site.entity_coverage,
        confidence=site.confidence,
        people_housed_reported=site.people_housed_reported,
        first_public_date=site.first_public_date,
        last_public_date=site.last_public_date,
        relationship_roles=roles,
        relationship_labels=tuple(format_role_label(role) for role in roles),
        money_record_count=len(binding.money_record_ids),
        integrity_signal_count=site.integrity_signal_count,
    )


def _site_sort_key(site: EntityProfileSite) -> tuple[int, int, str, str]:
    return (
        0 if site.status == "current" else 1,
        -site.integrity_signal_count,
        site.site_name,
        site.site_id,
    )


def _money_sort_key(record: MoneyRecord) -> tuple[int, float, str, str]:
    value = record.value_gbp if record.value_gbp is not None else -1
    return (-len(record.site_ids), -value, record.title, record.record_id)


def _sorted_source_links(links: Iterable[SourceLink]) -> tuple[SourceLink, ...]:
    return tuple(sorted(links, key=lambda link: (link.title, link.url, str(link.kind))))
