# egg_compare/config/settings.py

"""Central configuration for the egg_compare engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str) -> bool:
    """Interpret an environment variable as a boolean switch."""
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Central configuration for the egg_compare engine."""

    # --- Credentials (presence selects live vs mock per source) ---
    WALMART_AFFILIATE_ID: str = os.getenv("WALMART_AFFILIATE_ID", "")
    WALMART_API_KEY: str = os.getenv("WALMART_API_KEY", "")
    WALGREENS_API_KEY: str = os.getenv("WALGREENS_API_KEY", "")
    WALGREENS_API_SECRET: str = os.getenv("WALGREENS_API_SECRET", "")
    SEARCHAPI_KEY: str = os.getenv("SEARCHAPI_KEY", "")

    # --- Fetching ---
    REQUEST_DELAY: float = 1.0          # Backoff base between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    MOCK_FALLBACK: bool = _env_flag("EGG_COMPARE_MOCK_FALLBACK")

    # --- Product / comparison ---
    PRODUCT_QUERY: str = "eggs dozen large white"
    DEFAULT_ZIPCODE: str = os.getenv("EGG_COMPARE_ZIPCODE", "10001")
    DEFAULT_HISTORY_DAYS: int = 7
    GENERIC_PICKUP_ETA: str = "Check store availability"
    # Tie-break order for equal final prices
    RETAILER_PRIORITY: list[str] = ["walmart", "walgreens"]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources ---
    # ``credentials`` lists the env settings of which any one being set
    # switches the source to its live variant.
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "walmart",
            "label": "Walmart",
            "live": "egg_compare.sources.walmart_source.WalmartSource",
            "mock": "egg_compare.sources.mock_source.MockWalmartSource",
            "credentials": "WALMART_API_KEY",
        },
        {
            "id": "walgreens",
            "label": "Walgreens",
            "live": "egg_compare.sources.walgreens_source.WalgreensSource",
            "mock": "egg_compare.sources.mock_source.MockWalgreensSource",
            "credentials": "WALGREENS_API_KEY,SEARCHAPI_KEY",
        },
    ]
