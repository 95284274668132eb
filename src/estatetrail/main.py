#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from estatetrail.adapters.ledgers import LedgerError
from estatetrail.app import describe_place, describe_profile, describe_trails, load_profile_index
from estatetrail.config import (
    ConfigurationError,
    configure_logging,
    get_analytics_config,
    get_ledger_paths,
    log_level_from_env,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from estatetrail.app import LeadTrail, PlaceDetail, ProfileDetail, ProfileIndex
    from estatetrail.config import AnalyticsConfig


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile hotel, money and place ledgers into entity profiles"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the ledger JSON files (default: $ESTATETRAIL_DATA_DIR)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subcommands = parser.add_subparsers(dest="command", required=True)

    profiles = subcommands.add_parser("profiles", help="List the top-ranked entity profiles")
    profiles.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of profiles to show (default: %(default)s)",
    )
    profiles.add_argument("--json", action="store_true", help="Emit full profiles as JSON")

    profile = subcommands.add_parser("profile", help="Show one profile with its analytics")
    profile.add_argument("entity_id", help="Entity id, e.g. entity-12345678")
    profile.add_argument("--json", action="store_true", help="Emit the detail as JSON")

    subcommands.add_parser("trails", help="Show homepage and spending-linked trails")

    place = subcommands.add_parser("place", help="Show trails and prime provider for one area")
    place.add_argument("area", help="Area code or exact area name")

    args = parser.parse_args(list(argv))
    if getattr(args, "limit", 0) < 0:
        parser.error("--limit must be non-negative")
    return args


def _print_profiles(index: ProfileIndex, *, limit: int, as_json: bool) -> None:
    selected = index.profiles[:limit]
    if as_json:
        print(json.dumps([asdict(profile) for profile in selected], indent=2))
        return
    for rank, profile in enumerate(selected, start=1):
        print(
            f"{rank:>3}. {profile.entity_name} [{profile.entity_id}] "
            f"{profile.primary_role_label}, score {profile.score}"
        )
        print(f"     {profile.search_description}")


def _print_profile(detail: ProfileDetail, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(asdict(detail), indent=2))
        return
    profile = detail.profile
    print(f"{profile.entity_name} [{profile.entity_id}]")
    print(f"  Roles: {profile.role_summary}")
    if profile.company_number:
        print(f"  Company number: {profile.company_number}")
    print(f"  {profile.search_description}")

    exposure = detail.exposure
    print(
        f"  Current sites: {exposure.current_site_count} "
        f"({exposure.non_resolved_share_pct}% not fully resolved)"
    )
    for row in exposure.coverage_rows:
        print(f"    {row.label}: {row.count} ({row.share_pct}%)")

    if detail.linked_places:
        print("  Linked places:")
        for ranking in detail.linked_places:
            print(f"    {ranking.rank}. {ranking.area.area_name} ({ranking.site_label})")

    if detail.regions:
        print("  Regions:")
        for region in detail.regions:
            print(
                f"    {region.region_name}: {region.current_site_count} current, "
                f"{region.historical_site_count} historical"
            )

    if detail.timeline.events:
        print("  Timeline:")
        for event in detail.timeline.events:
            print(f"    {event.date}  {event.title}")

    coverage = detail.regional_coverage
    if coverage is not None:
        print(
            f"  Regional contracts: {', '.join(coverage.covered_regions)} "
            f"({coverage.covered_area_count} areas, "
            f"{coverage.direct_linked_area_count} directly linked)"
        )
        for area in coverage.top_covered_areas:
            print(f"    {area.area_name}: {area.supported_asylum} supported")


def _print_trails(title: str, trails: tuple[LeadTrail, ...]) -> None:
    print(title)
    if not trails:
        print("  (none)")
    for item in trails:
        trail = item.trail
        print(f"  [{trail.kicker}] {trail.title}")
        print(f"    {trail.summary}")
        if item.lead_entity is not None:
            print(f"    Lead entity: {item.lead_entity.entity_name} [{item.lead_entity.entity_id}]")


def _print_place(detail: PlaceDetail) -> None:
    area = detail.area
    print(f"{area.area_name} [{area.area_code}], {area.region_name}")
    print(
        f"  Supported asylum: {area.supported_asylum}, "
        f"contingency accommodation: {area.contingency_accommodation}"
    )
    if detail.prime_provider is not None:
        provider = detail.prime_provider.profile
        print(f"  Prime provider: {provider.entity_name} [{provider.entity_id}]")
    _print_trails("  Trails:", detail.trails)


def _run(args: argparse.Namespace, config: AnalyticsConfig) -> int:
    index = load_profile_index(get_ledger_paths(data_dir=args.data_dir))
    if args.command == "profiles":
        _print_profiles(index, limit=args.limit, as_json=args.json)
    elif args.command == "profile":
        detail = describe_profile(index, args.entity_id, config)
        if detail is None:
            print(f"Error: no entity profile '{args.entity_id}'", file=sys.stderr)
            return 1
        _print_profile(detail, as_json=args.json)
    elif args.command == "trails":
        overview = describe_trails(index, config)
        _print_trails("Homepage trails:", overview.homepage)
        _print_trails("Spending-linked trails:", overview.spending_linked)
    elif args.command == "place":
        place = describe_place(index, args.area, config)
        if place is None:
            print(f"Error: no place-ledger area '{args.area}'", file=sys.stderr)
            return 1
        _print_place(place)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    try:
        level = logging.DEBUG if parsed_args.verbose else log_level_from_env(logging.WARNING)
        configure_logging(level=level)
        config = get_analytics_config()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        status = _run(parsed_args, config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except LedgerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if status:
        sys.exit(status)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
