"""Errors raised while reading ledger documents."""

from __future__ import annotations


class LedgerError(ValueError):
    """Base class for ledger contract violations."""

    def __init__(self, ledger: str, message: str) -> None:
        self.ledger = ledger
        super().__init__(f"{ledger} ledger: {message}")


class LedgerStructureError(LedgerError):
    """Raised when a document's top-level shape breaks the ledger contract."""


class LedgerRowError(LedgerError):
    """Raised when one row cannot be validated against its schema."""

    def __init__(
        self,
        ledger: str,
        *,
        collection: str,
        index: int,
        row_id: str | None,
        detail: str,
    ) -> None:
        self.collection = collection
        self.index = index
        self.row_id = row_id
        location = f"{collection}[{index}]"
        if row_id:
            location = f"{location} ({row_id})"
        super().__init__(ledger, f"invalid row {location}: {detail}")
