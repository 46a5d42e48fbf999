"""Category table and data-location settings."""

import os
from typing import Optional

from calendar_browser.models import CategoryDescriptor

# Where category JSON files live: an http(s) base URL or a local directory.
DEFAULT_DATA_BASE = "./data/"
DEFAULT_FETCH_TIMEOUT = 30.0

CONFERENCES_TAG = "conferences"

CATEGORIES: list[CategoryDescriptor] = [
    CategoryDescriptor(tag="conferences", label="Conferences", source_locator="conferences.json"),
    CategoryDescriptor(tag="online", label="Online Seminars/Clubs", source_locator="online_seminars_clubs.json"),
    CategoryDescriptor(tag="special-issue", label="Special Features/Issues", source_locator="special_features_issues.json"),
    CategoryDescriptor(tag="education", label="Education", source_locator="education.json"),
    CategoryDescriptor(tag="grad-program", label="Grad Programs", source_locator="grad_programs.json"),
    CategoryDescriptor(tag="jobs", label="Jobs", source_locator="jobs.json"),
    CategoryDescriptor(tag="funding", label="Funding", source_locator="funding.json"),
    CategoryDescriptor(tag="competitions", label="Competitions", source_locator="competitions.json"),
]


def get_category(tag: str, categories: Optional[list[CategoryDescriptor]] = None) -> Optional[CategoryDescriptor]:
    """Look up a category by tag."""
    for cat in categories if categories is not None else CATEGORIES:
        if cat.tag == tag:
            return cat
    return None


def get_data_base() -> str:
    """Data base from CALENDAR_DATA_BASE (default: ./data/)."""
    return os.environ.get("CALENDAR_DATA_BASE", DEFAULT_DATA_BASE)


def get_fetch_timeout() -> float:
    """Request timeout in seconds from CALENDAR_FETCH_TIMEOUT."""
    raw = os.environ.get("CALENDAR_FETCH_TIMEOUT")
    if not raw:
        return DEFAULT_FETCH_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_FETCH_TIMEOUT
