from __future__ import annotations

from pathlib import Path

import pytest

from estatetrail.config import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
    optional_env_int,
    optional_env_path,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_EXAMPLE", "value")

    result = require_env_vars(["ESTATETRAIL_EXAMPLE"])

    assert result == {"ESTATETRAIL_EXAMPLE": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_BLANK", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["ESTATETRAIL_MISSING", "ESTATETRAIL_BLANK"])

    assert "ESTATETRAIL_BLANK, ESTATETRAIL_MISSING" in str(exc.value)


def test_optional_env_int_defaults_when_unset() -> None:
    assert optional_env_int("ESTATETRAIL_LIMIT", 5) == 5


def test_optional_env_int_parses_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_LIMIT", "12")

    assert optional_env_int("ESTATETRAIL_LIMIT", 5) == 12


@pytest.mark.parametrize(
    ("value", "reason"), [("ten", "must be an integer"), ("-1", "non-negative")]
)
def test_optional_env_int_rejects_bad_values(
    monkeypatch: pytest.MonkeyPatch, value: str, reason: str
) -> None:
    monkeypatch.setenv("ESTATETRAIL_LIMIT", value)

    with pytest.raises(InvalidConfigurationError, match=reason) as exc:
        optional_env_int("ESTATETRAIL_LIMIT", 5)

    assert exc.value.name == "ESTATETRAIL_LIMIT"
    assert isinstance(exc.value, ConfigurationError)


def test_optional_env_path_strips_and_expands(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", "/home/analyst")
    monkeypatch.setenv("ESTATETRAIL_SITE_LEDGER", " ~/ledgers/sites.json ")

    assert optional_env_path("ESTATETRAIL_SITE_LEDGER") == Path("/home/analyst/ledgers/sites.json")
    assert optional_env_path("ESTATETRAIL_MONEY_LEDGER") is None
