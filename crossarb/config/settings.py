# crossarb/config/settings.py

"""Central configuration for the crossarb engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float override from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    """Read an int override from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class Settings:
    """Central configuration for the crossarb engine."""

    # --- Scanning ---
    DEFAULT_QUERY: str = os.getenv("CROSSARB_DEFAULT_QUERY", "electronics")
    DEFAULT_MIN_MARGIN_PCT: float = _env_float(
        "CROSSARB_MIN_MARGIN_PCT", 15.0
    )
    DEFAULT_MAX_RESULTS: int = _env_int("CROSSARB_MAX_RESULTS", 20)
    PER_PLATFORM_RESULTS: int = 20      # Listings requested per adapter
    ADAPTER_TIMEOUT: float = _env_float(
        "CROSSARB_ADAPTER_TIMEOUT", 30.0
    )                                   # Seconds before one adapter is abandoned

    # --- Matching ---
    TITLE_SIMILARITY_THRESHOLD: float = 0.6
    UPC_CONFIDENCE: float = 1.0
    ASIN_CONFIDENCE: float = 0.95
    TITLE_CONFIDENCE: float = 0.7

    # --- Scoring ---
    MARGIN_SCORE_CAP: float = 50.0      # Margin % that earns a full score
    PROFIT_SCORE_CAP: float = 50.0      # Net profit that earns a full score
    DEFAULT_RELIABILITY: float = 0.5    # Unconfigured platforms

    # --- Paths & logging ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "CROSSARB_LOG_LEVEL", "WARNING"
    ).upper()
    MAX_LOG_FILES: int = _env_int("CROSSARB_MAX_LOG_FILES", 20)

    # --- Platforms (registry shown by the CLI) ---
    PLATFORMS: list[dict[str, str]] = [
        {"id": "amazon", "label": "Amazon"},
        {"id": "ebay", "label": "eBay"},
        {"id": "walmart", "label": "Walmart"},
        {"id": "aliexpress", "label": "AliExpress"},
        {"id": "bestbuy", "label": "Best Buy"},
        {"id": "target", "label": "Target"},
        {"id": "costco", "label": "Costco"},
        {"id": "homedepot", "label": "Home Depot"},
        {"id": "poshmark", "label": "Poshmark"},
        {"id": "mercari", "label": "Mercari"},
        {"id": "facebook", "label": "Facebook Marketplace"},
        {"id": "faire", "label": "Faire"},
        {"id": "bstock", "label": "B-Stock"},
        {"id": "bulq", "label": "BULQ"},
        {"id": "liquidation", "label": "Liquidation.com"},
    ]
