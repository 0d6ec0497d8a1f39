"""Configuration for the subscription tracker.

Values are module-level constants with environment variable overrides,
so the dashboard and the tests share one place for defaults.
"""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Snapshot exported by the store (subscriptions + settings)
DATA_PATH = Path(
    os.getenv("SUBTRACKER_DATA_PATH", _PROJECT_ROOT / "data" / "seed.json")
).resolve()

# Category used when a record has none
DEFAULT_CATEGORY = os.getenv("SUBTRACKER_DEFAULT_CATEGORY", "Other")

# Display currency; never used in arithmetic
DEFAULT_CURRENCY = os.getenv("SUBTRACKER_CURRENCY", "EUR")

# How many rows the "upcoming payments" views show
UPCOMING_LIMIT = int(os.getenv("SUBTRACKER_UPCOMING_LIMIT", "5"))

LOG_LEVEL = os.getenv("SUBTRACKER_LOG_LEVEL", "INFO").upper()


def get_data_path() -> str:
    """Get the snapshot path as a string."""
    return str(DATA_PATH)
