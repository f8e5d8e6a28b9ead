"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_float, optional_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, ResponseCacheConfig, RetryPolicy
from .rendering import PacingConfig, RenderingConfig, get_pacing_config, get_rendering_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .store import RemoteStoreConfig, get_remote_store_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PacingConfig",
    "RateLimit",
    "RemoteStoreConfig",
    "RenderingConfig",
    "ResilienceConfig",
    "ResponseCacheConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_database_config",
    "get_pacing_config",
    "get_remote_store_config",
    "get_rendering_config",
    "get_storage_config",
    "optional_float",
    "optional_int",
    "require_env_vars",
]
