import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://earthquake.phivolcs.dost.gov.ph"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# Endpoint keys used for rate limit bookkeeping
LATEST_ENDPOINT = "/api/phivolcs/latest"
DETAILS_ENDPOINT = "/api/phivolcs/details"
STATS_ENDPOINT = "/api/phivolcs/stats"


@dataclass
class Settings:
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = None
    max_retries: int = 1
    latest_rate_limit: int = 20
    details_rate_limit: int = 30
    rate_limit_window_seconds: int = 5 * 60
    rate_limit_sweep_seconds: int = 10 * 60
    host: str = "0.0.0.0"
    port: int = 5000


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _get_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def load_settings() -> Settings:
    """
    Load service settings from the environment (and a local .env file).

    Returns:
        Settings: Populated settings, falling back to the defaults above
    """
    load_dotenv()

    settings = Settings(
        base_url=os.getenv("PHIVOLCS_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        user_agent=os.getenv("PHIVOLCS_USER_AGENT") or DEFAULT_USER_AGENT,
        timeout=_get_float("PHIVOLCS_TIMEOUT", None),
        max_retries=_get_int("PHIVOLCS_MAX_RETRIES", 1),
        latest_rate_limit=_get_int("LATEST_RATE_LIMIT", 20),
        details_rate_limit=_get_int("DETAILS_RATE_LIMIT", 30),
        rate_limit_window_seconds=_get_int("RATE_LIMIT_WINDOW_SECONDS", 5 * 60),
        rate_limit_sweep_seconds=_get_int("RATE_LIMIT_SWEEP_SECONDS", 10 * 60),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_get_int("PORT", 5000),
    )

    if settings.max_retries < 1:
        raise ValueError("PHIVOLCS_MAX_RETRIES must be at least 1")

    return settings
