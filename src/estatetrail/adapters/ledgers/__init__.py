"""Public interface for the ledger adapter."""

from __future__ import annotations

from .errors import LedgerError, LedgerRowError, LedgerStructureError
from .loader import Ledgers, load_ledgers, load_money_ledger, load_place_ledger, load_site_ledger
from .translator import parse_money_ledger, parse_place_ledger, parse_site_ledger

__all__ = [
    "LedgerError",
    "LedgerRowError",
    "LedgerStructureError",
    "Ledgers",
    "load_ledgers",
    "load_money_ledger",
    "load_place_ledger",
    "load_site_ledger",
    "parse_money_ledger",
    "parse_place_ledger",
    "parse_site_ledger",
]
