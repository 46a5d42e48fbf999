"""Record enrichers."""

from calendar_browser.enrichers.popularity import (
    POPULAR_CONFERENCES,
    build_quick_links,
    filter_popular,
    is_popular,
    matches_entry,
)

__all__ = [
    "POPULAR_CONFERENCES",
    "build_quick_links",
    "filter_popular",
    "is_popular",
    "matches_entry",
]
