"""Remote territory store configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import optional_float, optional_int, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, ResponseCacheConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

DEFAULT_LISTING_TTL_SECONDS = 30.0
DEFAULT_MAX_CALLS_PER_SECOND = 20


@dataclass(frozen=True, slots=True)
class RemoteStoreConfig:
    """Per-record calls are never cached; listing queries may be up to a TTL old."""

    resilience: ResilienceConfig
    listing_resilience: ResilienceConfig


def get_remote_store_config(*, storage: StorageConfig | None = None) -> RemoteStoreConfig:
    base_url = require_env_vars(("PIXELSYNC_STORE_URL",))["PIXELSYNC_STORE_URL"].rstrip("/")
    headers = {"Accept": "application/json"}
    if token := os.getenv("PIXELSYNC_STORE_TOKEN"):
        headers["Authorization"] = f"Bearer {token}"
    ratelimit = RateLimit(
        max_calls=optional_int("PIXELSYNC_STORE_MAX_CALLS", DEFAULT_MAX_CALLS_PER_SECOND)
    )

    records = ResilienceConfig(
        name="territory-store",
        base_url=base_url,
        ratelimit=ratelimit,
        default_headers=headers,
    )
    listing_cache = ResponseCacheConfig(
        database_path=(storage or get_storage_config()).http_cache_path(),
        ttl_seconds=optional_float("PIXELSYNC_LISTING_TTL_SECONDS", DEFAULT_LISTING_TTL_SECONDS),
    )
    listings = ResilienceConfig(
        name="territory-store-listings",
        base_url=base_url,
        retry=RetryPolicy(total=2),
        ratelimit=ratelimit,
        cache=listing_cache,
        default_headers=headers,
    )
    return RemoteStoreConfig(resilience=records, listing_resilience=listings)
