from __future__ import annotations

import pytest

from estatetrail.domain.reconciliation.normalize import (
    entity_key,
    format_role_label,
    format_route_family_label,
    names_match,
    normalize_name,
    slugify,
    sort_roles,
)


def test_normalize_name_collapses_punctuation_and_case() -> None:
    assert normalize_name("  Example-Group  LTD. ") == "example group ltd"
    assert normalize_name(None) == ""


def test_slugify_joins_alphanumeric_runs_with_hyphens() -> None:
    assert slugify("Coastline Hotels (UK) Ltd") == "coastline-hotels-uk-ltd"
    assert slugify("01234567") == "01234567"


def test_entity_key_prefers_company_number() -> None:
    assert entity_key("Example Group", "03929881") == "03929881"
    assert entity_key("Example Group Ltd", " 03929881 ") == "03929881"


def test_entity_key_lowercases_company_number() -> None:
    assert entity_key("Scottish Entity", "SC123456") == "sc123456"


def test_entity_key_falls_back_to_normalized_name() -> None:
    assert entity_key("Example Group Ltd", None) == "example group ltd"
    assert entity_key("Example Group Ltd", "   ") == "example group ltd"


def test_entity_key_is_empty_without_identity() -> None:
    assert entity_key(None, None) == ""
    assert entity_key("  ", "") == ""


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("Serco", "Serco Group", True),
        ("Serco Group plc", "serco", True),
        ("Mears", "Mears", True),
        ("Mears", "Clearsprings Ready Homes", False),
        ("", "Serco", False),
        ("Serco", None, False),
    ],
)
def test_names_match_uses_substring_containment(
    left: str, right: str | None, expected: bool
) -> None:
    assert names_match(left, right) is expected


def test_sort_roles_orders_by_priority_then_name() -> None:
    roles = {"hotel_operator", "prime_provider", "zeta_role", "alpha_role", "owner_group"}

    assert sort_roles(roles) == (
        "prime_provider",
        "owner_group",
        "hotel_operator",
        "alpha_role",
        "zeta_role",
    )


def test_role_and_route_labels_fall_back_to_readable_codes() -> None:
    assert format_role_label("brand_operator") == "Brand operator"
    assert format_role_label("landlord_agent") == "landlord agent"
    assert format_route_family_label("homes_for_ukraine") == "Homes for Ukraine"
    assert format_route_family_label("custom_route") == "custom_route"
