# src/config/settings.py

"""Central configuration for the catalog_browser application."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the catalog_browser application."""

    # --- Catalog API ---
    API_BASE_URL: str = os.getenv(
        "CATALOG_API_BASE_URL", "https://dummyjson.com"
    )
    REQUEST_TIMEOUT: int = int(
        os.getenv("CATALOG_REQUEST_TIMEOUT", "15")
    )                                   # Seconds before a request times out
    PAGE_SIZE: int = int(
        os.getenv("CATALOG_PAGE_SIZE", "20")
    )                                   # Products per list page

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Listing ---
    DEFAULT_SORT: str = "price-asc"
    # Shown when the categories endpoint is unavailable
    FALLBACK_CATEGORIES: list[str] = [
        "smartphones",
        "laptops",
        "fragrances",
        "skincare",
        "groceries",
        "home-decoration",
        "furniture",
        "tops",
        "womens-dresses",
        "womens-shoes",
        "mens-shirts",
        "mens-shoes",
        "mens-watches",
        "womens-watches",
        "womens-bags",
        "womens-jewellery",
        "sunglasses",
        "automotive",
        "motorcycle",
        "lighting",
    ]

    # --- Deep Links ---
    DEEP_LINK_SCHEME: str = "productsapp"

    # --- Reminders ---
    REMINDER_LEAD_HOURS: float = 24.0       # Default delay before a reminder
    REMINDER_DURATION_MINUTES: int = 60     # Calendar event length
    REMINDER_LOOKAHEAD_DAYS: int = 30       # Window for upcoming reminders
    REMINDER_TITLE_PREFIX: str = "Purchase Reminder"
    REMINDER_LOCATION: str = "Products App"

    # --- Health Check ---
    HEALTH_TIMEOUT: int = 10            # Seconds per endpoint check
    HEALTH_SLOW_MS: float = 5000.0      # Latency above this is "slow"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    REMINDERS_DIR: Path = Path(
        os.getenv(
            "CATALOG_REMINDERS_DIR", str(BASE_DIR / "reminders")
        )
    )
