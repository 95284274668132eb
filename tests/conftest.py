from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from estatetrail.adapters.ledgers import load_ledgers
from estatetrail.config import LedgerPaths
from estatetrail.domain.reconciliation import build_entity_profiles

if TYPE_CHECKING:
    from estatetrail.adapters.ledgers import Ledgers
    from estatetrail.domain.model import EntityProfile


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("ESTATETRAIL_"):
            monkeypatch.delenv(name)


@pytest.fixture(scope="session")
def ledger_dir() -> Path:
    return Path(__file__).resolve().parent / "data" / "ledgers"


@pytest.fixture(scope="session")
def ledger_paths(ledger_dir: Path) -> LedgerPaths:
    return LedgerPaths(data_dir=ledger_dir)


@pytest.fixture(scope="session")
def fixture_ledgers(ledger_paths: LedgerPaths) -> Ledgers:
    return load_ledgers(ledger_paths)


@pytest.fixture(scope="session")
def fixture_profiles(fixture_ledgers: Ledgers) -> tuple[EntityProfile, ...]:
    return build_entity_profiles(
        fixture_ledgers.sites, fixture_ledgers.money, fixture_ledgers.places
    )
