"""Application configuration helpers."""

from __future__ import annotations

from .env import env_bool, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .store import StoreConfig, get_store_config
from .sync import DEFAULT_BATCH_SIZE, SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StoreConfig",
    "SyncConfig",
    "configure_logging",
    "env_bool",
    "env_int",
    "get_store_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
