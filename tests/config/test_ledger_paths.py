from __future__ import annotations

from pathlib import Path

import pytest

from estatetrail.config import (
    AnalyticsConfig,
    InvalidConfigurationError,
    LedgerPaths,
    MissingConfigurationError,
    get_analytics_config,
    get_ledger_paths,
)


def test_ledger_paths_resolve_default_filenames(tmp_path: Path) -> None:
    paths = LedgerPaths(data_dir=tmp_path)

    assert paths.site_ledger_path() == tmp_path.resolve() / "hotel-entity-ledger.json"
    assert paths.money_ledger_path() == tmp_path.resolve() / "money-ledger.json"
    assert paths.place_ledger_path() == tmp_path.resolve() / "local-route-latest.json"


def test_get_ledger_paths_reads_data_dir_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("ESTATETRAIL_DATA_DIR", str(tmp_path))

    paths = get_ledger_paths()

    assert paths.data_dir == tmp_path


def test_explicit_data_dir_wins_over_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("ESTATETRAIL_DATA_DIR", "/somewhere/else")

    paths = get_ledger_paths(data_dir=tmp_path)

    assert paths.data_dir == tmp_path


def test_get_ledger_paths_requires_a_data_dir() -> None:
    with pytest.raises(MissingConfigurationError, match="ESTATETRAIL_DATA_DIR"):
        get_ledger_paths()


def test_per_file_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "money.json"
    monkeypatch.setenv("ESTATETRAIL_SITE_LEDGER", "snapshots/sites-2025.json")
    monkeypatch.setenv("ESTATETRAIL_MONEY_LEDGER", str(absolute))

    paths = get_ledger_paths(data_dir=tmp_path)

    assert paths.site_ledger_path() == tmp_path.resolve() / "snapshots" / "sites-2025.json"
    assert paths.money_ledger_path() == absolute
    assert paths.place_ledger_path().name == "local-route-latest.json"


def test_analytics_config_defaults() -> None:
    assert get_analytics_config() == AnalyticsConfig(
        linked_place_limit=5,
        coverage_area_limit=5,
        homepage_trail_limit=3,
        spending_trail_limit=4,
        place_trail_limit=3,
    )


def test_analytics_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_HOMEPAGE_TRAIL_LIMIT", "6")
    monkeypatch.setenv("ESTATETRAIL_LINKED_PLACE_LIMIT", "0")

    config = get_analytics_config()

    assert config.homepage_trail_limit == 6
    assert config.linked_place_limit == 0
    assert config.spending_trail_limit == 4


def test_analytics_config_rejects_invalid_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_PLACE_TRAIL_LIMIT", "three")

    with pytest.raises(InvalidConfigurationError, match="ESTATETRAIL_PLACE_TRAIL_LIMIT"):
        get_analytics_config()
