"""Read the three ledger JSON files from disk."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import LedgerStructureError
from .translator import (
    MONEY_LEDGER,
    PLACE_LEDGER,
    SITE_LEDGER,
    parse_money_ledger,
    parse_place_ledger,
    parse_site_ledger,
)

if TYPE_CHECKING:
    from pathlib import Path

    from estatetrail.config import LedgerPaths
    from estatetrail.domain.model import MoneyLedger, PlaceLedger, SiteLedger


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Ledgers:
    """The three inputs of one reconciliation run."""

    sites: SiteLedger
    money: MoneyLedger
    places: PlaceLedger


def read_document(path: Path, ledger: str) -> object:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise LedgerStructureError(ledger, f"file not found: {path}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LedgerStructureError(ledger, f"invalid JSON in {path}: {exc.msg}") from exc


def load_site_ledger(path: Path) -> SiteLedger:
    ledger = parse_site_ledger(read_document(path, SITE_LEDGER))
    log.info(
        "Loaded site ledger from %s: %d sites, %d areas", path, len(ledger.sites), len(ledger.areas)
    )
    return ledger


def load_money_ledger(path: Path) -> MoneyLedger:
    ledger = parse_money_ledger(read_document(path, MONEY_LEDGER))
    log.info(
        "Loaded money ledger from %s: %d records, %d supplier profiles",
        path,
        len(ledger.records),
        len(ledger.supplier_profiles),
    )
    return ledger


def load_place_ledger(path: Path) -> PlaceLedger:
    ledger = parse_place_ledger(read_document(path, PLACE_LEDGER))
    log.info("Loaded place ledger from %s: %d areas", path, len(ledger.areas))
    return ledger


def load_ledgers(paths: LedgerPaths) -> Ledgers:
    return Ledgers(
        sites=load_site_ledger(paths.site_ledger_path()),
        money=load_money_ledger(paths.money_ledger_path()),
        places=load_place_ledger(paths.place_ledger_path()),
    )
