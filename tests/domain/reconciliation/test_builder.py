from __future__ import annotations

from estatetrail.domain.model import SiteStatus, SourceLinkKind
from estatetrail.domain.reconciliation import EntityAccumulator, build_accumulators
from estatetrail.domain.reconciliation.builder import pick_risk_level
from tests.helpers.ledgers import (
    make_link,
    make_record,
    make_signal,
    make_site,
    make_supplier,
    money_ledger,
    site_ledger,
)


def test_accumulator_generates_slug_id_when_no_supplier_id() -> None:
    by_number = EntityAccumulator.create(
        preferred_id=None, entity_name="Example Group", company_number="03929881"
    )
    by_name = EntityAccumulator.create(
        preferred_id=None, entity_name="Harbour Hotels Ltd", company_number=None
    )

    assert by_number.entity_id == "entity-03929881"
    assert by_name.entity_id == "entity-harbour-hotels-ltd"


def test_auto_id_is_replaced_by_later_supplier_id() -> None:
    accumulator = EntityAccumulator.create(
        preferred_id=None, entity_name="Acme", company_number=None
    )

    accumulator.merge_identity(
        preferred_id="supplier_acme", entity_name="Acme", company_number=None
    )
    accumulator.merge_identity(
        preferred_id="supplier_other", entity_name="Acme", company_number=None
    )

    assert accumulator.entity_id == "supplier_acme"


def test_identity_merge_keeps_first_company_number_and_longest_name() -> None:
    accumulator = EntityAccumulator.create(
        preferred_id="supplier_1", entity_name="Example Group Ltd", company_number=None
    )

    accumulator.merge_identity(preferred_id=None, entity_name="Example", company_number="111")
    accumulator.merge_identity(preferred_id=None, entity_name="Example", company_number="222")

    assert accumulator.entity_name == "Example Group Ltd"
    assert accumulator.company_number == "111"


def test_pick_risk_level_keeps_higher_priority() -> None:
    assert pick_risk_level("low", "high") == "high"
    assert pick_risk_level("high", "medium") == "high"
    assert pick_risk_level(None, "warning") == "warning"
    assert pick_risk_level("medium", "warning") == "medium"
    assert pick_risk_level("unknown", None) == "unknown"


def test_money_record_attaches_to_supplier_by_supplier_id() -> None:
    supplier = make_supplier("supplier_acme", "Acme Ltd", company_number="00000001")
    record = make_record("rec_1", supplier_id="supplier_acme", supplier_name="ACME Trading")

    accumulators = build_accumulators(site_ledger(), money_ledger(record, suppliers=(supplier,)))

    assert list(accumulators) == ["00000001"]
    assert set(accumulators["00000001"].money_records) == {"rec_1"}


def test_money_record_without_identity_is_skipped() -> None:
    record = make_record("rec_1", supplier_name=None)

    accumulators = build_accumulators(site_ledger(), money_ledger(record))

    assert accumulators == {}


def test_money_record_unknown_supplier_id_falls_back_to_key() -> None:
    record = make_record("rec_1", supplier_id="supplier_new", supplier_name="New Co")

    accumulators = build_accumulators(site_ledger(), money_ledger(record))

    accumulator = accumulators["new co"]
    assert accumulator.entity_id == "supplier_new"


def test_money_record_without_name_uses_placeholder() -> None:
    record = make_record("rec_1", supplier_name=None, supplier_company_number="99999999")

    accumulators = build_accumulators(site_ledger(), money_ledger(record))

    assert accumulators["99999999"].entity_name == "Unnamed supplier"


def test_site_links_bind_sites_with_roles_and_sources() -> None:
    site = make_site(
        "site_1",
        links=(
            make_link("Harbour Hotels", link_role="owner_group", source_url="https://e.org/a"),
            make_link("Harbour Hotels", link_role="operator"),
        ),
    )

    accumulators = build_accumulators(site_ledger(site), money_ledger())

    accumulator = accumulators["harbour hotels"]
    assert accumulator.site_bindings["site_1"].roles == {"owner_group", "operator"}
    kinds = {link.kind for link in accumulator.source_links.values()}
    assert kinds == {SourceLinkKind.HOTEL_LINK}


def test_prime_provider_binds_site_as_prime_provider() -> None:
    site = make_site("site_1", prime_provider="Serco")

    accumulators = build_accumulators(site_ledger(site), money_ledger())

    accumulator = accumulators["serco"]
    assert accumulator.entity_id == "entity-serco"
    assert accumulator.site_bindings["site_1"].roles == {"prime_provider"}
    assert [link.kind for link in accumulator.source_links.values()] == [
        SourceLinkKind.PRIME_PROVIDER
    ]


def test_supplier_site_ids_backfill_bindings_and_ignore_unknown_sites() -> None:
    site = make_site("site_1")
    supplier = make_supplier(
        "supplier_x", "Acme Ltd", entity_role="operator", site_ids=("site_1", "site_404")
    )

    accumulators = build_accumulators(site_ledger(site), money_ledger(suppliers=(supplier,)))

    bindings = accumulators["acme ltd"].site_bindings
    assert set(bindings) == {"site_1"}
    assert bindings["site_1"].roles == {"operator"}


def test_money_record_site_ids_never_create_bindings() -> None:
    site = make_site("site_1")
    record = make_record("rec_1", supplier_name="Acme Ltd", site_ids=("site_1",))

    accumulators = build_accumulators(site_ledger(site), money_ledger(record))

    assert accumulators["acme ltd"].site_bindings == {}


def test_money_record_ids_are_counted_on_existing_bindings() -> None:
    site = make_site("site_1", links=(make_link("Acme Ltd"),))
    record = make_record("rec_1", supplier_name="Acme Ltd", site_ids=("site_1",))

    accumulators = build_accumulators(site_ledger(site), money_ledger(record))

    assert accumulators["acme ltd"].site_bindings["site_1"].money_record_ids == {"rec_1"}


def test_signals_counted_once_per_site_across_roles() -> None:
    site = make_site(
        "site_1",
        links=(
            make_link("Acme Ltd", link_role="owner_group"),
            make_link("Acme Ltd", link_role="operator"),
        ),
        signals=(make_signal("sig_1"), make_signal("sig_2")),
    )
    supplier = make_supplier("supplier_acme", "Acme Ltd", site_ids=("site_1",))

    accumulators = build_accumulators(site_ledger(site), money_ledger(suppliers=(supplier,)))

    assert accumulators["acme ltd"].integrity_signal_ids == {"sig_1", "sig_2"}


def test_historical_sites_are_bound_too() -> None:
    site = make_site("site_old", status=SiteStatus.HISTORICAL, links=(make_link("Acme Ltd"),))

    accumulators = build_accumulators(site_ledger(site), money_ledger())

    assert set(accumulators["acme ltd"].site_bindings) == {"site_old"}


def test_supplier_notes_and_source_urls_are_collected() -> None:
    supplier = make_supplier(
        "supplier_acme",
        "Acme Ltd",
        source_urls=("https://e.org/acme", "https://e.org/acme"),
        notes="Named in committee papers.",
    )

    accumulators = build_accumulators(site_ledger(), money_ledger(suppliers=(supplier,)))

    accumulator = accumulators["acme ltd"]
    assert len(accumulator.source_links) == 1
    assert accumulator.notes == {"Named in committee papers."}
