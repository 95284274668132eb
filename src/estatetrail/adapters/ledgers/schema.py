"""Pydantic models describing the three canonical ledger documents.

Identity fields are optional here on purpose: upstream ledgers carry partially
redacted rows, and the translator decides which rows to skip.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_empty(value: object) -> object:
    return [] if value is None else value


class LedgerBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        frozen=True,
    )


class SourceRefPayload(LedgerBaseModel):
    title: str = ""
    url: str = ""


class EntityLinkPayload(LedgerBaseModel):
    entity_name: str | None = None
    company_number: str | None = None
    link_role: str = "other"
    confidence: str = "low"
    sources: list[SourceRefPayload] = Field(default_factory=list["SourceRefPayload"])
    notes: str | None = None

    _normalize_blank = field_validator("entity_name", "company_number", "notes", mode="before")(
        _blank_to_none
    )
    _normalize_lists = field_validator("sources", mode="before")(_none_to_empty)


class IntegritySignalPayload(LedgerBaseModel):
    signal_id: str
    signal_type: str = ""
    severity: str = ""
    headline: str | None = None


class PrimeProviderPayload(LedgerBaseModel):
    provider: str | None = None
    regions: list[str] = Field(default_factory=list[str])
    note: str | None = None
    source_url: str = ""

    _normalize_blank = field_validator("provider", "note", mode="before")(_blank_to_none)
    _normalize_lists = field_validator("regions", mode="before")(_none_to_empty)


class SitePayload(LedgerBaseModel):
    site_id: str | None = None
    site_name: str = ""
    area_name: str = ""
    area_code: str | None = None
    region_name: str = ""
    country_name: str = ""
    status: str = "other"
    entity_coverage: str = "unresolved"
    confidence: str = "low"
    people_housed_reported: int | None = None
    first_public_date: str | None = None
    last_public_date: str | None = None
    source_title: str | None = None
    source_url: str | None = None
    entity_links: list[EntityLinkPayload] = Field(default_factory=list["EntityLinkPayload"])
    integrity_signals: list[IntegritySignalPayload] = Field(
        default_factory=list["IntegritySignalPayload"]
    )
    prime_provider: PrimeProviderPayload | None = None

    _normalize_blank = field_validator(
        "site_id",
        "area_code",
        "first_public_date",
        "last_public_date",
        "source_title",
        "source_url",
        mode="before",
    )(_blank_to_none)
    _normalize_lists = field_validator("entity_links", "integrity_signals", mode="before")(
        _none_to_empty
    )


class SiteLedgerAreaPayload(LedgerBaseModel):
    area_name: str = ""
    area_code: str | None = None
    region_name: str = ""
    country_name: str = ""
    current_named_site_count: int = 0
    historical_named_site_count: int = 0
    unnamed_site_count: int = 0
    people_housed_reported: int | None = None
    source_title: str = ""
    source_url: str = ""

    _normalize_blank = field_validator("area_code", mode="before")(_blank_to_none)


class LinkedSitePayload(LedgerBaseModel):
    site_id: str
    site_name: str = ""
    area_name: str = ""
    region_name: str = ""
    entity_coverage: str = "unresolved"


class MoneyRecordPayload(LedgerBaseModel):
    record_id: str | None = None
    record_type: str = ""
    title: str = ""
    buyer_name: str = ""
    supplier_id: str | None = None
    supplier_name: str | None = None
    supplier_company_number: str | None = None
    supplier_role: str | None = None
    route_family: str | None = None
    value_gbp: float | None = None
    geography_scope: str | None = None
    award_date: str | None = None
    published_date: str | None = None
    site_ids: list[str] = Field(default_factory=list[str])
    linked_sites: list[LinkedSitePayload] = Field(default_factory=list["LinkedSitePayload"])
    source_title: str | None = None
    source_url: str | None = None

    _normalize_blank = field_validator(
        "record_id",
        "supplier_id",
        "supplier_name",
        "supplier_company_number",
        "supplier_role",
        "route_family",
        "geography_scope",
        "award_date",
        "published_date",
        "source_title",
        "source_url",
        mode="before",
    )(_blank_to_none)
    _normalize_lists = field_validator("site_ids", "linked_sites", mode="before")(_none_to_empty)


class SupplierProfilePayload(LedgerBaseModel):
    supplier_id: str | None = None
    entity_name: str | None = None
    entity_role: str = "other"
    company_number: str | None = None
    route_families: list[str] = Field(default_factory=list[str])
    site_ids: list[str] = Field(default_factory=list[str])
    public_contract_count: int = 0
    public_contract_value_gbp: float | None = None
    risk_level: str | None = None
    integrity_signal_count: int = 0
    source_urls: list[str] = Field(default_factory=list[str])
    notes: str | None = None

    _normalize_blank = field_validator(
        "supplier_id", "entity_name", "company_number", "risk_level", "notes", mode="before"
    )(_blank_to_none)
    _normalize_lists = field_validator(
        "route_families", "site_ids", "source_urls", mode="before"
    )(_none_to_empty)


class PlaceAreaPayload(LedgerBaseModel):
    area_code: str | None = None
    area_name: str | None = None
    region_name: str = ""
    country_name: str = ""
    supported_asylum: int = 0
    supported_asylum_rate: float | None = None
    contingency_accommodation: int = 0

    _normalize_blank = field_validator("area_code", "area_name", mode="before")(_blank_to_none)

    @field_validator("supported_asylum", "contingency_accommodation", mode="before")
    @classmethod
    def _null_count_to_zero(cls, value: object) -> object:
        return 0 if value is None else value


LedgerDocument: TypeAlias = Mapping[str, Any]
