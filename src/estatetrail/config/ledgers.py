"""Where the three ledger documents live."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_path, require_env_vars

DATA_DIR_ENV: Final[str] = "ESTATETRAIL_DATA_DIR"
SITE_LEDGER_ENV: Final[str] = "ESTATETRAIL_SITE_LEDGER"
MONEY_LEDGER_ENV: Final[str] = "ESTATETRAIL_MONEY_LEDGER"
PLACE_LEDGER_ENV: Final[str] = "ESTATETRAIL_PLACE_LEDGER"

DEFAULT_SITE_LEDGER_FILENAME: Final[str] = "hotel-entity-ledger.json"
DEFAULT_MONEY_LEDGER_FILENAME: Final[str] = "money-ledger.json"
DEFAULT_PLACE_LEDGER_FILENAME: Final[str] = "local-route-latest.json"


@dataclass(frozen=True, slots=True)
class LedgerPaths:
    data_dir: Path
    site_ledger_file: Path = Path(DEFAULT_SITE_LEDGER_FILENAME)
    money_ledger_file: Path = Path(DEFAULT_MONEY_LEDGER_FILENAME)
    place_ledger_file: Path = Path(DEFAULT_PLACE_LEDGER_FILENAME)

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def _resolve(self, file: Path) -> Path:
        # Absolute overrides ignore the data directory.
        return file if file.is_absolute() else self.resolve_data_dir() / file

    def site_ledger_path(self) -> Path:
        return self._resolve(self.site_ledger_file)

    def money_ledger_path(self) -> Path:
        return self._resolve(self.money_ledger_file)

    def place_ledger_path(self) -> Path:
        return self._resolve(self.place_ledger_file)


def get_ledger_paths(*, data_dir: Path | None = None) -> LedgerPaths:
    """Build ledger paths from ``data_dir`` or ``ESTATETRAIL_DATA_DIR``.

    Per-file environment overrides apply in both cases.
    """

    if data_dir is None:
        data_dir = Path(require_env_vars([DATA_DIR_ENV])[DATA_DIR_ENV])
    return LedgerPaths(
        data_dir=data_dir,
        site_ledger_file=optional_env_path(SITE_LEDGER_ENV) or Path(DEFAULT_SITE_LEDGER_FILENAME),
        money_ledger_file=optional_env_path(MONEY_LEDGER_ENV)
        or Path(DEFAULT_MONEY_LEDGER_FILENAME),
        place_ledger_file=optional_env_path(PLACE_LEDGER_ENV)
        or Path(DEFAULT_PLACE_LEDGER_FILENAME),
    )
