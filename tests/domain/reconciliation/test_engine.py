from __future__ import annotations

from typing import TYPE_CHECKING

from estatetrail.domain.model import EntityCoverage, SiteStatus
from estatetrail.domain.reconciliation import (
    ProfileCache,
    build_entity_profiles,
    entity_key,
    get_entity_profile,
)
from tests.helpers.ledgers import (
    make_link,
    make_place,
    make_record,
    make_signal,
    make_site,
    make_supplier,
    money_ledger,
    place_ledger,
    site_ledger,
)

if TYPE_CHECKING:
    from estatetrail.domain.model import MoneyLedger, PlaceLedger, SiteLedger


def _mixed_ledgers() -> tuple[SiteLedger, MoneyLedger, PlaceLedger]:
    sites = site_ledger(
        make_site(
            "site_1",
            links=(
                make_link("Example Group", company_number="03929881", link_role="owner_group"),
                make_link("Harbour Ops", link_role="operator"),
            ),
            signals=(make_signal("sig_1"),),
            prime_provider="Serco",
        ),
        make_site(
            "site_2",
            status=SiteStatus.HISTORICAL,
            entity_coverage=EntityCoverage.PARTIAL,
            links=(make_link("Example Group Ltd", company_number="03929881"),),
        ),
        make_site(
            "site_3",
            area_name="Sampleford",
            area_code="E07000002",
            entity_coverage=EntityCoverage.RESOLVED,
            links=(make_link("Harbour Ops", link_role="brand_operator"),),
        ),
    )
    money = money_ledger(
        make_record("rec_1", supplier_id="supplier_serco", supplier_name="Serco", value_gbp=50),
        make_record("rec_2", supplier_name="Harbour Ops", site_ids=("site_3",)),
        suppliers=(
            make_supplier(
                "supplier_serco", "Serco", entity_role="prime_provider", site_ids=("site_1",)
            ),
        ),
    )
    places = place_ledger(
        make_place("E06000001", "Exampleton", supported_asylum=800, contingency_accommodation=10),
        make_place("E07000002", "Sampleford", supported_asylum=100),
    )
    return sites, money, places


def test_build_is_deterministic() -> None:
    ledgers = _mixed_ledgers()

    assert build_entity_profiles(*ledgers) == build_entity_profiles(*ledgers)


def test_profiles_sorted_by_score_then_name() -> None:
    profiles = build_entity_profiles(*_mixed_ledgers())

    keys = [(-profile.score, profile.entity_name) for profile in profiles]
    assert keys == sorted(keys)


def test_company_number_rows_share_one_entity_id() -> None:
    profiles = build_entity_profiles(*_mixed_ledgers())

    matching = [profile for profile in profiles if profile.company_number == "03929881"]
    assert len(matching) == 1
    assert matching[0].entity_id == "entity-03929881"


def test_every_bound_site_is_backed_by_a_link_or_supplier_row() -> None:
    sites, money, places = _mixed_ledgers()

    for profile in build_entity_profiles(sites, money, places):
        for site_id in profile.site_ids:
            site = next(site for site in sites.sites if site.site_id == site_id)
            linked_keys = {
                entity_key(link.entity_name, link.company_number) for link in site.entity_links
            }
            if site.prime_provider:
                linked_keys.add(entity_key(site.prime_provider.provider, None))
            by_supplier = any(
                supplier.supplier_id in profile.supplier_ids and site_id in supplier.site_ids
                for supplier in money.supplier_profiles
            )
            own_key = entity_key(profile.entity_name, profile.company_number)
            assert own_key in linked_keys or by_supplier


def test_every_money_record_has_a_resolvable_supplier() -> None:
    sites, money, places = _mixed_ledgers()

    for profile in build_entity_profiles(sites, money, places):
        for record in profile.money_records:
            assert (
                record.supplier_id in profile.supplier_ids
                or entity_key(record.supplier_name, record.supplier_company_number)
                == entity_key(profile.entity_name, profile.company_number)
            )


def test_coverage_partition_holds_for_every_profile() -> None:
    for profile in build_entity_profiles(*_mixed_ledgers()):
        assert profile.current_site_count + profile.historical_site_count == len(
            set(profile.site_ids)
        )
        assert profile.unresolved_current_site_count <= profile.current_site_count


def test_signal_dedupe_across_roles_on_same_site() -> None:
    sites = site_ledger(
        make_site(
            "site_1",
            links=(
                make_link("Acme Ltd", link_role="owner_group"),
                make_link("Acme Ltd", link_role="operator"),
            ),
            signals=(make_signal("sig_1"), make_signal("sig_2")),
        )
    )

    (profile,) = build_entity_profiles(sites, money_ledger(), place_ledger())

    assert profile.integrity_signal_count == 2
    assert profile.current_sites[0].relationship_roles == ("owner_group", "operator")


def test_supplier_site_id_binds_site_without_entity_link() -> None:
    sites = site_ledger(
        make_site("site_1", status=SiteStatus.CURRENT, entity_coverage=EntityCoverage.UNRESOLVED)
    )
    money = money_ledger(
        suppliers=(
            make_supplier("supplier_x", "Acme Ltd", entity_role="operator", site_ids=("site_1",)),
        )
    )

    profile = get_entity_profile(build_entity_profiles(sites, money, place_ledger()), "supplier_x")

    assert profile is not None
    assert profile.current_site_count == 1
    assert profile.unresolved_current_site_count == 1
    assert profile.primary_role == "operator"


def test_company_number_merges_names_and_keeps_longest() -> None:
    assert entity_key("Example Group", "03929881") == "03929881"
    assert entity_key("Example Group Ltd", "03929881") == "03929881"
    sites = site_ledger(
        make_site("site_1", links=(make_link("Example Group", company_number="03929881"),)),
        make_site("site_2", links=(make_link("Example Group Ltd", company_number="03929881"),)),
    )

    (profile,) = build_entity_profiles(sites, money_ledger(), place_ledger())

    assert profile.entity_name == "Example Group Ltd"
    assert profile.current_site_count == 2


def test_undisclosed_values_are_not_summed_as_zero() -> None:
    money = money_ledger(
        make_record("rec_1", value_gbp=None),
        make_record("rec_2", value_gbp=None),
    )

    (profile,) = build_entity_profiles(site_ledger(), money, place_ledger())

    assert profile.public_contract_value_gbp is None
    assert profile.money_rows_with_published_value_count == 0
    assert profile.public_contract_count == 2


def test_get_entity_profile_returns_none_for_unknown_id() -> None:
    profiles = build_entity_profiles(*_mixed_ledgers())

    assert get_entity_profile(profiles, "entity-missing") is None
    assert get_entity_profile(profiles, "supplier_serco") is not None


def test_profile_cache_reuses_profiles_for_equal_inputs() -> None:
    cache = ProfileCache()
    first = cache.profiles(*_mixed_ledgers())
    second = cache.profiles(*_mixed_ledgers())

    assert second is first
    assert cache.builds == 1


def test_profile_cache_rebuilds_when_inputs_change() -> None:
    cache = ProfileCache()
    sites, money, places = _mixed_ledgers()
    cache.profiles(sites, money, places)

    changed = cache.profiles(sites, money_ledger(), places)

    assert cache.builds == 2
    assert all(profile.money_record_count == 0 for profile in changed)


def test_profile_cache_clear_forces_rebuild() -> None:
    cache = ProfileCache()
    ledgers = _mixed_ledgers()
    cache.profiles(*ledgers)

    cache.clear()
    cache.profiles(*ledgers)

    assert cache.builds == 2


def test_separate_caches_do_not_share_state() -> None:
    ledgers = _mixed_ledgers()
    first, second = ProfileCache(), ProfileCache()

    first.profiles(*ledgers)

    assert second.builds == 0
