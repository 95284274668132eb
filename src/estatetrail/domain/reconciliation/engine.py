"""Entry points for the reconciliation core.

``build_entity_profiles`` is stateless: every call rebuilds the whole index
from the three ledgers. Callers that want reuse own a :class:`ProfileCache`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

from .builder import build_accumulators
from .finalize import finalize_profiles

if TYPE_CHECKING:
    from collections.abc import Iterable

    from estatetrail.domain.model import EntityProfile, MoneyLedger, PlaceLedger, SiteLedger


log = logging.getLogger(__name__)

LedgerFingerprint: TypeAlias = int


def build_entity_profiles(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
) -> tuple[EntityProfile, ...]:
    """Reconcile the three ledgers into ranked entity profiles."""

    accumulators = build_accumulators(site_ledger, money_ledger)
    profiles = finalize_profiles(accumulators.values(), place_ledger)
    log.debug(
        "Built %d entity profiles from %d sites, %d money records, %d supplier profiles",
        len(profiles),
        len(site_ledger.sites),
        len(money_ledger.records),
        len(money_ledger.supplier_profiles),
    )
    return profiles


def ledger_fingerprint(
    site_ledger: SiteLedger,
    money_ledger: MoneyLedger,
    place_ledger: PlaceLedger,
) -> LedgerFingerprint:
    return hash((site_ledger, money_ledger, place_ledger))


@dataclass(slots=True)
class ProfileCache:
    """Caller-owned memo of the last profile collection and its inputs.

    The cache compares the full ledger triple, not just the fingerprint, so a
    hash collision can never return stale profiles.
    """

    _fingerprint: LedgerFingerprint | None = field(default=None, repr=False)
    _inputs: tuple[SiteLedger, MoneyLedger, PlaceLedger] | None = field(
        default=None, repr=False
    )
    _profiles: tuple[EntityProfile, ...] = field(default=(), repr=False)
    builds: int = 0

    def profiles(
        self,
        site_ledger: SiteLedger,
        money_ledger: MoneyLedger,
        place_ledger: PlaceLedger,
    ) -> tuple[EntityProfile, ...]:
        inputs = (site_ledger, money_ledger, place_ledger)
        fingerprint = ledger_fingerprint(*inputs)
        if fingerprint == self._fingerprint and inputs == self._inputs:
            return self._profiles
        self._profiles = build_entity_profiles(*inputs)
        self._fingerprint = fingerprint
        self._inputs = inputs
        self.builds += 1
        return self._profiles

    def clear(self) -> None:
        self._fingerprint = None
        self._inputs = None
        self._profiles = ()


def get_entity_profile(
    profiles: Iterable[EntityProfile],
    entity_id: str,
) -> EntityProfile | None:
    return next((profile for profile in profiles if profile.entity_id == entity_id), None)
