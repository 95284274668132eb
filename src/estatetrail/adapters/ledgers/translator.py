"""Translate ledger documents into domain ledgers.

Structural problems (a document that is not an object, a required array that
is missing) are fatal. Rows that validate but carry no usable identity are
dropped and logged; upstream ledgers are known to redact some rows.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from logging import getLogger
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from estatetrail.domain.model import (
    EntityCoverage,
    EntityLink,
    IntegritySignal,
    LinkedSite,
    MoneyLedger,
    MoneyRecord,
    PlaceArea,
    PlaceLedger,
    PrimeProvider,
    Site,
    SiteLedger,
    SiteLedgerArea,
    SiteStatus,
    SourceRef,
    SupplierProfile,
)

from .errors import LedgerRowError, LedgerStructureError
from .schema import (
    MoneyRecordPayload,
    PlaceAreaPayload,
    SiteLedgerAreaPayload,
    SitePayload,
    SupplierProfilePayload,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .schema import EntityLinkPayload, LedgerDocument, PrimeProviderPayload

SITE_LEDGER = "site"
MONEY_LEDGER = "money"
PLACE_LEDGER = "place"

log = getLogger(__name__)


def parse_site_ledger(document: object) -> SiteLedger:
    mapping = _require_mapping(document, SITE_LEDGER)
    sites: list[Site] = []
    for index, payload in _validated_rows(mapping, SITE_LEDGER, "sites", SitePayload, "siteId"):
        if payload.site_id is None:
            log.debug("Skipping site row %d without a site id", index)
            continue
        sites.append(_to_site(payload))

    areas = tuple(
        _to_site_ledger_area(payload)
        for _index, payload in _validated_rows(
            mapping,
            SITE_LEDGER,
            "areas",
            SiteLedgerAreaPayload,
            "areaCode",
            required=False,
        )
    )
    return SiteLedger(sites=tuple(sites), areas=areas)


def parse_money_ledger(document: object) -> MoneyLedger:
    mapping = _require_mapping(document, MONEY_LEDGER)
    records: list[MoneyRecord] = []
    for index, payload in _validated_rows(
        mapping, MONEY_LEDGER, "records", MoneyRecordPayload, "recordId"
    ):
        if payload.record_id is None:
            log.debug("Skipping money record row %d without a record id", index)
            continue
        records.append(_to_money_record(payload))

    suppliers: list[SupplierProfile] = []
    for index, payload in _validated_rows(
        mapping,
        MONEY_LEDGER,
        "supplierProfiles",
        SupplierProfilePayload,
        "supplierId",
        required=False,
    ):
        supplier = _to_supplier_profile(payload)
        if supplier is None:
            log.debug("Skipping supplier profile row %d without name or id", index)
            continue
        suppliers.append(supplier)
    return MoneyLedger(records=tuple(records), supplier_profiles=tuple(suppliers))


def parse_place_ledger(document: object) -> PlaceLedger:
    mapping = _require_mapping(document, PLACE_LEDGER)
    areas: list[PlaceArea] = []
    for index, payload in _validated_rows(
        mapping, PLACE_LEDGER, "areas", PlaceAreaPayload, "areaCode"
    ):
        if payload.area_code is None and payload.area_name is None:
            log.debug("Skipping place row %d without code or name", index)
            continue
        areas.append(
            PlaceArea(
                area_code=payload.area_code or "",
                area_name=payload.area_name or "",
                region_name=payload.region_name,
                country_name=payload.country_name,
                supported_asylum=payload.supported_asylum,
                supported_asylum_rate=payload.supported_asylum_rate,
                contingency_accommodation=payload.contingency_accommodation,
            )
        )
    return PlaceLedger(areas=tuple(areas))


def _require_mapping(document: object, ledger: str) -> LedgerDocument:
    if not isinstance(document, Mapping):
        raise LedgerStructureError(
            ledger, f"expected a JSON object, got {type(document).__name__}"
        )
    return document  # pyright: ignore[reportUnknownVariableType]


PayloadT = TypeVar("PayloadT", bound=BaseModel)


def _validated_rows(
    document: LedgerDocument,
    ledger: str,
    collection: str,
    model: type[PayloadT],
    id_field: str,
    *,
    required: bool = True,
) -> Iterator[tuple[int, PayloadT]]:
    rows = document.get(collection)
    if rows is None and not required:
        return
    if not isinstance(rows, Sequence) or isinstance(rows, str | bytes):
        raise LedgerStructureError(ledger, f"missing '{collection}' array")

    for index, row in enumerate(rows):
        try:
            yield index, model.model_validate(row)
        except ValidationError as exc:
            row_id = row.get(id_field) if isinstance(row, Mapping) else None
            raise LedgerRowError(
                ledger,
                collection=collection,
                index=index,
                row_id=str(row_id) if row_id is not None else None,
                detail=str(exc.errors()[0]["msg"]) if exc.errors() else str(exc),
            ) from exc


def _site_status(value: str) -> SiteStatus:
    try:
        return SiteStatus(value)
    except ValueError:
        return SiteStatus.OTHER


def _entity_coverage(value: str) -> EntityCoverage:
    try:
        return EntityCoverage(value)
    except ValueError:
        return EntityCoverage.UNRESOLVED


def _to_site(payload: SitePayload) -> Site:
    return Site(
        site_id=payload.site_id or "",
        site_name=payload.site_name,
        area_name=payload.area_name,
        area_code=payload.area_code,
        region_name=payload.region_name,
        country_name=payload.country_name,
        status=_site_status(payload.status),
        entity_coverage=_entity_coverage(payload.entity_coverage),
        confidence=payload.confidence,
        people_housed_reported=payload.people_housed_reported,
        first_public_date=payload.first_public_date,
        last_public_date=payload.last_public_date,
        source_title=payload.source_title,
        source_url=payload.source_url,
        entity_links=tuple(_to_entity_link(link) for link in payload.entity_links),
        integrity_signals=tuple(
            IntegritySignal(
                signal_id=signal.signal_id,
                signal_type=signal.signal_type,
                severity=signal.severity,
                headline=signal.headline,
            )
            for signal in payload.integrity_signals
        ),
        prime_provider=_to_prime_provider(payload.prime_provider),
    )


def _to_entity_link(payload: EntityLinkPayload) -> EntityLink:
    return EntityLink(
        entity_name=payload.entity_name or "",
        company_number=payload.company_number,
        link_role=payload.link_role,
        confidence=payload.confidence,
        sources=tuple(
            SourceRef(title=source.title, url=source.url)
            for source in payload.sources
            if source.url
        ),
        notes=payload.notes,
    )


def _to_prime_provider(payload: PrimeProviderPayload | None) -> PrimeProvider | None:
    if payload is None or payload.provider is None:
        return None
    return PrimeProvider(
        provider=payload.provider,
        regions=tuple(payload.regions),
        note=payload.note,
        source_url=payload.source_url,
    )


def _to_site_ledger_area(payload: SiteLedgerAreaPayload) -> SiteLedgerArea:
    return SiteLedgerArea(
        area_name=payload.area_name,
        area_code=payload.area_code,
        region_name=payload.region_name,
        country_name=payload.country_name,
        current_named_site_count=payload.current_named_site_count,
        historical_named_site_count=payload.historical_named_site_count,
        unnamed_site_count=payload.unnamed_site_count,
        people_housed_reported=payload.people_housed_reported,
        source_title=payload.source_title,
        source_url=payload.source_url,
    )


def _to_money_record(payload: MoneyRecordPayload) -> MoneyRecord:
    return MoneyRecord(
        record_id=payload.record_id or "",
        record_type=payload.record_type,
        title=payload.title,
        buyer_name=payload.buyer_name,
        supplier_id=payload.supplier_id,
        supplier_name=payload.supplier_name,
        supplier_company_number=payload.supplier_company_number,
        supplier_role=payload.supplier_role,
        route_family=payload.route_family,
        value_gbp=payload.value_gbp,
        geography_scope=payload.geography_scope,
        award_date=payload.award_date,
        published_date=payload.published_date,
        site_ids=tuple(payload.site_ids),
        linked_sites=tuple(
            LinkedSite(
                site_id=site.site_id,
                site_name=site.site_name,
                area_name=site.area_name,
                region_name=site.region_name,
                entity_coverage=site.entity_coverage,
            )
            for site in payload.linked_sites
        ),
        source_title=payload.source_title,
        source_url=payload.source_url,
    )


def _to_supplier_profile(payload: SupplierProfilePayload) -> SupplierProfile | None:
    if payload.entity_name is None and payload.company_number is None:
        return None
    return SupplierProfile(
        supplier_id=payload.supplier_id or "",
        entity_name=payload.entity_name or "",
        entity_role=payload.entity_role,
        company_number=payload.company_number,
        route_families=tuple(payload.route_families),
        site_ids=tuple(payload.site_ids),
        public_contract_count=payload.public_contract_count,
        public_contract_value_gbp=payload.public_contract_value_gbp,
        risk_level=payload.risk_level,
        integrity_signal_count=payload.integrity_signal_count,
        source_urls=tuple(payload.source_urls),
        notes=payload.notes,
    )
