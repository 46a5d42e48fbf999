"""Data models for the calendar browser."""

from calendar_browser.models.record import (
    UNTITLED,
    CacheEntry,
    CategoryDescriptor,
    ErrorInfo,
    LoadStatus,
    NormalizedRecord,
    PopularConference,
    QuickLink,
    SelectionState,
    SubMode,
    ViewMarker,
    VisibleState,
)

__all__ = [
    "UNTITLED",
    "CacheEntry",
    "CategoryDescriptor",
    "ErrorInfo",
    "LoadStatus",
    "NormalizedRecord",
    "PopularConference",
    "QuickLink",
    "SelectionState",
    "SubMode",
    "ViewMarker",
    "VisibleState",
]
