"""Remote inventory store configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from stocksync import __version__

from .env import env_int, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

STORE_TIMEOUT_SECONDS = 30.0
DEFAULT_RATE_LIMIT_PER_SECOND = 20
DEFAULT_PAGE_SIZE = 500


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Holds the inventory store API configuration values."""

    resilience: ResilienceConfig
    page_size: int = DEFAULT_PAGE_SIZE


def get_store_config() -> StoreConfig:
    values = require_env_vars(("STOCKSYNC_API_URL",))
    base_url = values["STOCKSYNC_API_URL"].rstrip("/") + "/"
    user_agent = optional_env_var("STOCKSYNC_USER_AGENT") or f"stocksync/{__version__}"
    rate = env_int("STOCKSYNC_RATE_LIMIT", DEFAULT_RATE_LIMIT_PER_SECOND, minimum=1)

    resilience = ResilienceConfig(
        name="store",
        base_url=base_url,
        timeout_seconds=STORE_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=rate, per_seconds=1.0),
        retry=RetryPolicy(total=4),
        default_headers={"User-Agent": user_agent, "Accept": "application/json"},
    )
    return StoreConfig(
        resilience=resilience,
        page_size=env_int("STOCKSYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE, minimum=1),
    )
