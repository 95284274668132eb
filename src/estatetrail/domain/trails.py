"""Investigation trails: one site's ownership evidence, its best money match,
and the local pressure figures for its area.

Matching is one step per current site:
- ``direct``: some money record lists the site id
- ``provider``: the site's prime provider name-matches an asylum-support supplier
- ``none``: neither
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from estatetrail.domain.model import (
    ROLE_PRIME_PROVIDER,
    ROUTE_ASYLUM_SUPPORT,
    EntityCoverage,
    MoneyMatchType,
    PlaceIndex,
    TrailKind,
)
from estatetrail.domain.reconciliation.normalize import names_match

if TYPE_CHECKING:
    from collections.abc import Iterable

    from estatetrail.domain.model import (
        EntityProfile,
        MoneyLedger,
        MoneyRecord,
        PlaceArea,
        PlaceLedger,
        Site,
        SiteLedger,
        SiteLedgerArea,
    )


_COVERAGE_BASE_SCORE: dict[EntityCoverage, int] = {
    EntityCoverage.UNRESOLVED: 300,
    EntityCoverage.PARTIAL: 220,
    EntityCoverage.RESOLVED: 160,
}
DIRECT_MATCH_SCORE = 80
INDIRECT_MATCH_SCORE = 35
SCORE_PER_INTEGRITY_SIGNAL = 20


@dataclass(frozen=True, slots=True, kw_only=True)
class MoneyMatch:
    match_type: MoneyMatchType
    records: tuple[MoneyRecord, ...] = ()
    provider_name: str | None = None

    @property
    def lead_record(self) -> MoneyRecord | None:
        return self.records[0] if self.records else None


@dataclass(frozen=True, slots=True, kw_only=True)
class InvestigationTrail:
    trail_id: str
    kind: TrailKind
    kicker: str
    title: str
    summary: str
    area_name: str
    area_code: str | None
    site_id: str | None
    site_name: str | None
    entity_coverage: EntityCoverage | None
    supported_asylum: int | None
    contingency_accommodation: int | None
    match_type: MoneyMatchType
    money_lead_title: str | None
    record_ids: tuple[str, ...]

    @property
    def area_key(self) -> str:
        return self.area_code or self.area_name


@dataclass(frozen=True, slots=True)
class TrailCandidate:
    trail: InvestigationTrail
    score: int


def match_money(site: Site, records: Iterable[MoneyRecord]) -> MoneyMatch:
    """Find the best money evidence for ``site``."""

    records = tuple(records)
    provider_name = site.prime_provider.provider if site.prime_provider else None
    direct = tuple(record for record in records if site.site_id in record.site_ids)
    if direct:
        return MoneyMatch(
            match_type=MoneyMatchType.DIRECT,
            records=direct,
            provider_name=provider_name,
        )
    if not provider_name:
        return MoneyMatch(match_type=MoneyMatchType.NONE)

    by_provider = tuple(
        record
        for record in records
        if record.route_family == ROUTE_ASYLUM_SUPPORT
        and names_match(provider_name, record.supplier_name)
    )
    if by_provider:
        return MoneyMatch(
            match_type=MoneyMatchType.PROVIDER,
            records=by_provider,
            provider_name=provider_name,
        )
    return MoneyMatch(match_type=MoneyMatchType.NONE, provider_name=provider_name)


def score_trail(site: Site, match: MoneyMatch, area: PlaceArea | None) -> int:
    return (
        _COVERAGE_BASE_SCORE.get(site.entity_coverage, 160)
        + (
            DIRECT_MATCH_SCORE
            if match.match_type is MoneyMatchType.DIRECT
            else INDIRECT_MATCH_SCORE
        )
        + site.integrity_signal_count * SCORE_PER_INTEGRITY_SIGNAL
        + (area.contingency_accommodation if area else 0)
        + round((area.supported_asylum if area else 0) / 5)
    )


def build_site_trail(site: Site, area: PlaceArea | None, match: MoneyMatch) -> InvestigationTrail:
    unresolved = site.entity_coverage is EntityCoverage.UNRESOLVED
    lead = match.lead_record
    if area is not None:
        pressure = (
            f"{area.supported_asylum:,} people were on asylum support there at quarter end, "
            f"with {area.contingency_accommodation:,} in contingency accommodation."
        )
    else:
        pressure = "No local pressure figures are published for this place."

    if match.match_type is MoneyMatchType.DIRECT:
        summary = (
            f"{site.site_name} in {site.area_name} already has a direct public money row "
            f"attached. {pressure}"
        )
    elif match.match_type is MoneyMatchType.PROVIDER:
        summary = (
            f"{site.site_name} in {site.area_name} already has a public hotel row and a "
            f"provider-level money trail. {pressure}"
        )
    else:
        summary = (
            f"{site.site_name} in {site.area_name} has a public hotel row but no matching "
            f"public money row yet. {pressure}"
        )

    return InvestigationTrail(
        trail_id=f"trail:{site.site_id}",
        kind=TrailKind.SITE,
        kicker="Broken chain" if unresolved else "Visible chain",
        title=(
            f"{site.site_name} is public, but the chain still breaks"
            if unresolved
            else f"{site.site_name} now links the hotel and money layers"
        ),
        summary=summary,
        area_name=site.area_name,
        area_code=site.area_code,
        site_id=site.site_id,
        site_name=site.site_name,
        entity_coverage=site.entity_coverage,
        supported_asylum=area.supported_asylum if area else None,
        contingency_accommodation=area.contingency_accommodation if area else None,
        match_type=match.match_type,
        money_lead_title=lead.title if lead else None,
        record_ids=tuple(record.record_id for record in match.records),
    )


def build_area_visibility_trail(
    area: PlaceArea,
    site_area: SiteLedgerArea,
) -> InvestigationTrail:
    """Area-level trail for places that acknowledge hotel use without naming sites."""

    unnamed = site_area.unnamed_site_count
    sites = f"{unnamed} unnamed site{'' if unnamed == 1 else 's'}"
    if site_area.people_housed_reported is not None:
        summary = (
            f"{sites} are publicly acknowledged here, with "
            f"{site_area.people_housed_reported:,} people reported."
        )
    else:
        summary = f"{sites} are publicly acknowledged here without a publishable hotel list."
    return InvestigationTrail(
        trail_id=f"trail:visibility:{area.area_code}",
        kind=TrailKind.AREA,
        kicker="Visibility gap",
        title=f"{area.area_name} acknowledges hotel use without naming the full estate",
        summary=summary,
        area_name=area.area_name,
        area_code=area.area_code,
        site_id=None,
        site_name=None,
        entity_coverage=None,
        supported_asylum=area.supported_asylum,
        contingency_accommodation=area.contingency_accommodation,
        match_type=MoneyMatchType.NONE,
        money_lead_title=None,
        record_ids=(),
    )


def site_trails(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
) -> tuple[TrailCandidate, ...]:
    """Score one trail per current site, best first, ties by title."""

    places = PlaceIndex.from_ledger(place_ledger)
    candidates: list[TrailCandidate] = []
    for site in site_ledger.sites:
        if not site.is_current:
            continue
        area = places.lookup(site.area_code, site.area_name)
        match = match_money(site, money_ledger.records)
        candidates.append(
            TrailCandidate(
                trail=build_site_trail(site, area, match),
                score=score_trail(site, match, area),
            )
        )
    candidates.sort(key=lambda candidate: (-candidate.score, candidate.trail.title))
    return tuple(candidates)


def site_trail_map(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
) -> dict[str, InvestigationTrail]:
    return {
        candidate.trail.site_id: candidate.trail
        for candidate in site_trails(site_ledger, money_ledger, place_ledger)
        if candidate.trail.site_id
    }


def homepage_trails(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
    limit: int = 3,
) -> tuple[InvestigationTrail, ...]:
    """Top trails, at most one per area."""

    selected: list[InvestigationTrail] = []
    seen_areas: set[str] = set()
    for candidate in site_trails(site_ledger, money_ledger, place_ledger):
        if len(selected) >= limit:
            break
        if candidate.trail.area_key in seen_areas:
            continue
        selected.append(candidate.trail)
        seen_areas.add(candidate.trail.area_key)
    return tuple(selected)


def spending_linked_trails(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
    limit: int = 4,
) -> tuple[InvestigationTrail, ...]:
    """Top direct-match trails, at most one per lead money record."""

    selected: list[InvestigationTrail] = []
    seen_records: set[str] = set()
    for candidate in site_trails(site_ledger, money_ledger, place_ledger):
        if len(selected) >= limit:
            break
        trail = candidate.trail
        if trail.match_type is not MoneyMatchType.DIRECT:
            continue
        lead_record_id = trail.record_ids[0] if trail.record_ids else trail.trail_id
        if lead_record_id in seen_records:
            continue
        selected.append(trail)
        seen_records.add(lead_record_id)
    return tuple(selected)


def place_trails(
    area: PlaceArea,
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
    limit: int = 3,
) -> tuple[InvestigationTrail, ...]:
    """Site trails in one place, plus a visibility trail for unnamed hotel use."""

    trails = [
        candidate.trail
        for candidate in site_trails(site_ledger, money_ledger, place_ledger)
        if candidate.trail.area_code == area.area_code
        or candidate.trail.area_name == area.area_name
    ]
    site_area = next(
        (
            candidate
            for candidate in site_ledger.areas
            if candidate.area_code == area.area_code or candidate.area_name == area.area_name
        ),
        None,
    )
    if site_area is not None and site_area.unnamed_site_count > 0:
        trails.append(build_area_visibility_trail(area, site_area))
    return tuple(trails[: max(limit, 0)])


def lead_entity_for_trail(
    trail: InvestigationTrail,
    profiles: Iterable[EntityProfile],
) -> EntityProfile | None:
    """Pick the profile that best explains a trail.

    +30 when the profile is bound to the trail's site, +50 when it holds one of
    the trail's money records, +10 for prime providers. Zero scores never win;
    ties go to the higher profile score.
    """

    best: tuple[int, int, EntityProfile] | None = None
    for profile in profiles:
        score = 0
        if trail.site_id and trail.site_id in profile.site_ids:
            score += 30
        if any(profile.has_money_record(record_id) for record_id in trail.record_ids):
            score += 50
        if profile.primary_role == ROLE_PRIME_PROVIDER:
            score += 10
        if score <= 0:
            continue
        if best is None or (score, profile.score) > (best[0], best[1]):
            best = (score, profile.score, profile)
    return best[2] if best else None
