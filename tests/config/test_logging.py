from __future__ import annotations

import logging

import pytest

from estatetrail.config import InvalidConfigurationError, configure_logging, log_level_from_env


def test_log_level_defaults_when_unset() -> None:
    assert log_level_from_env(logging.WARNING) == logging.WARNING


def test_log_level_accepts_level_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_LOG_LEVEL", " debug ")

    assert log_level_from_env() == logging.DEBUG


def test_log_level_rejects_unknown_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESTATETRAIL_LOG_LEVEL", "chatty")

    with pytest.raises(InvalidConfigurationError, match="ESTATETRAIL_LOG_LEVEL"):
        log_level_from_env()


def test_configure_logging_passes_level_and_format(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)

    configure_logging(level=logging.DEBUG, force=True)

    assert captured["level"] == logging.DEBUG
    assert captured["force"] is True
    assert captured["format"] == "%(asctime)s %(levelname)s [%(name)s] %(message)s"
