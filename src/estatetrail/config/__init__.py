"""Application configuration helpers."""

from __future__ import annotations

from .analytics import AnalyticsConfig, get_analytics_config
from .env import optional_env_int, optional_env_path, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .ledgers import LedgerPaths, get_ledger_paths
from .logging import configure_logging, log_level_from_env

__all__ = [
    "AnalyticsConfig",
    "ConfigurationError",
    "InvalidConfigurationError",
    "LedgerPaths",
    "MissingConfigurationError",
    "configure_logging",
    "get_analytics_config",
    "get_ledger_paths",
    "log_level_from_env",
    "optional_env_int",
    "optional_env_path",
    "require_env_vars",
]
