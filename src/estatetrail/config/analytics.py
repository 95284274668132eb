"""Default list sizes for analytics and trail selections."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_int

DEFAULT_LINKED_PLACE_LIMIT = 5
DEFAULT_COVERAGE_AREA_LIMIT = 5
DEFAULT_HOMEPAGE_TRAIL_LIMIT = 3
DEFAULT_SPENDING_TRAIL_LIMIT = 4
DEFAULT_PLACE_TRAIL_LIMIT = 3


@dataclass(frozen=True, slots=True)
class AnalyticsConfig:
    linked_place_limit: int = DEFAULT_LINKED_PLACE_LIMIT
    coverage_area_limit: int = DEFAULT_COVERAGE_AREA_LIMIT
    homepage_trail_limit: int = DEFAULT_HOMEPAGE_TRAIL_LIMIT
    spending_trail_limit: int = DEFAULT_SPENDING_TRAIL_LIMIT
    place_trail_limit: int = DEFAULT_PLACE_TRAIL_LIMIT


def get_analytics_config() -> AnalyticsConfig:
    return AnalyticsConfig(
        linked_place_limit=optional_env_int(
            "ESTATETRAIL_LINKED_PLACE_LIMIT", DEFAULT_LINKED_PLACE_LIMIT
        ),
        coverage_area_limit=optional_env_int(
            "ESTATETRAIL_COVERAGE_AREA_LIMIT", DEFAULT_COVERAGE_AREA_LIMIT
        ),
        homepage_trail_limit=optional_env_int(
            "ESTATETRAIL_HOMEPAGE_TRAIL_LIMIT", DEFAULT_HOMEPAGE_TRAIL_LIMIT
        ),
        spending_trail_limit=optional_env_int(
            "ESTATETRAIL_SPENDING_TRAIL_LIMIT", DEFAULT_SPENDING_TRAIL_LIMIT
        ),
        place_trail_limit=optional_env_int(
            "ESTATETRAIL_PLACE_TRAIL_LIMIT", DEFAULT_PLACE_TRAIL_LIMIT
        ),
    )
