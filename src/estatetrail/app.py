"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from estatetrail.adapters.ledgers import load_ledgers
from estatetrail.config import AnalyticsConfig, get_analytics_config
from estatetrail.domain.analytics import (
    area_prime_provider_coverage,
    entity_timeline,
    exposure_summary,
    linked_place_rankings,
    region_spread,
    regional_contract_coverage,
)
from estatetrail.domain.model import PlaceIndex
from estatetrail.domain.reconciliation import ProfileCache, get_entity_profile
from estatetrail.domain.trails import (
    homepage_trails,
    lead_entity_for_trail,
    place_trails,
    spending_linked_trails,
)

if TYPE_CHECKING:
    from estatetrail.adapters.ledgers import Ledgers
    from estatetrail.config import LedgerPaths
    from estatetrail.domain.analytics import (
        AreaProviderCoverage,
        EntityTimeline,
        ExposureSummary,
        LinkedPlaceRanking,
        RegionalContractCoverage,
        RegionSpreadRow,
    )
    from estatetrail.domain.model import EntityProfile, PlaceArea
    from estatetrail.domain.trails import InvestigationTrail


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProfileIndex:
    ledgers: Ledgers
    profiles: tuple[EntityProfile, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class ProfileDetail:
    """One profile with every analytics view computed from it."""

    profile: EntityProfile
    exposure: ExposureSummary
    regions: tuple[RegionSpreadRow, ...]
    linked_places: tuple[LinkedPlaceRanking, ...]
    timeline: EntityTimeline
    regional_coverage: RegionalContractCoverage | None


@dataclass(frozen=True, slots=True)
class LeadTrail:
    trail: InvestigationTrail
    lead_entity: EntityProfile | None


@dataclass(frozen=True, slots=True, kw_only=True)
class TrailOverview:
    homepage: tuple[LeadTrail, ...]
    spending_linked: tuple[LeadTrail, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaceDetail:
    area: PlaceArea
    trails: tuple[LeadTrail, ...]
    prime_provider: AreaProviderCoverage | None


def load_profile_index(
    paths: LedgerPaths,
    *,
    cache: ProfileCache | None = None,
) -> ProfileIndex:
    """Load the three ledgers and reconcile them into ranked profiles."""

    ledgers = load_ledgers(paths)
    effective_cache = cache if cache is not None else ProfileCache()
    profiles = effective_cache.profiles(ledgers.sites, ledgers.money, ledgers.places)
    log.info(
        "Built %d entity profiles (builds=%d) from %s",
        len(profiles),
        effective_cache.builds,
        paths.resolve_data_dir(),
    )
    return ProfileIndex(ledgers=ledgers, profiles=profiles)


def describe_profile(
    index: ProfileIndex,
    entity_id: str,
    config: AnalyticsConfig | None = None,
) -> ProfileDetail | None:
    profile = get_entity_profile(index.profiles, entity_id)
    if profile is None:
        log.debug("No profile with id %s", entity_id)
        return None
    effective_config = config or get_analytics_config()
    return ProfileDetail(
        profile=profile,
        exposure=exposure_summary(profile),
        regions=region_spread(profile),
        linked_places=linked_place_rankings(profile, effective_config.linked_place_limit),
        timeline=entity_timeline(profile),
        regional_coverage=regional_contract_coverage(
            profile,
            index.ledgers.places,
            index.ledgers.sites.areas,
            limit=effective_config.coverage_area_limit,
        ),
    )


def describe_trails(
    index: ProfileIndex,
    config: AnalyticsConfig | None = None,
) -> TrailOverview:
    effective_config = config or get_analytics_config()
    ledgers = index.ledgers
    return TrailOverview(
        homepage=_with_leads(
            homepage_trails(
                ledgers.sites,
                ledgers.money,
                ledgers.places,
                limit=effective_config.homepage_trail_limit,
            ),
            index.profiles,
        ),
        spending_linked=_with_leads(
            spending_linked_trails(
                ledgers.sites,
                ledgers.money,
                ledgers.places,
                limit=effective_config.spending_trail_limit,
            ),
            index.profiles,
        ),
    )


def describe_place(
    index: ProfileIndex,
    area_key: str,
    config: AnalyticsConfig | None = None,
) -> PlaceDetail | None:
    """Trails and the covering prime provider for one area, by code or name."""

    ledgers = index.ledgers
    area = PlaceIndex.from_ledger(ledgers.places).lookup(area_key, area_key)
    if area is None:
        log.debug("No place-ledger area for %s", area_key)
        return None
    effective_config = config or get_analytics_config()
    trails = place_trails(
        area,
        ledgers.sites,
        ledgers.money,
        ledgers.places,
        limit=effective_config.place_trail_limit,
    )
    return PlaceDetail(
        area=area,
        trails=_with_leads(trails, index.profiles),
        prime_provider=area_prime_provider_coverage(
            area, index.profiles, ledgers.places, ledgers.sites.areas
        ),
    )


def _with_leads(
    trails: tuple[InvestigationTrail, ...],
    profiles: tuple[EntityProfile, ...],
) -> tuple[LeadTrail, ...]:
    return tuple(LeadTrail(trail, lead_entity_for_trail(trail, profiles)) for trail in trails)
