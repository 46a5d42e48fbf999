"""Data models for the calendar browser."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

UNTITLED = "(Untitled)"


class CategoryDescriptor(BaseModel):
    """One browsable category, backed by one JSON data file."""

    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    source_locator: str  # e.g. "conferences.json", joined to the data base


class NormalizedRecord(BaseModel):
    """Canonical, category-agnostic display unit."""

    # Identity
    category_tag: str
    category_label: str
    source_identifier: str = ""  # Raw "id", used for popularity and anchors

    # Display fields
    title: str = UNTITLED
    website: str = ""
    location: str = ""
    dates: str = ""
    frequency: str = ""
    deadlines: str = ""
    organization: str = ""
    description: str = ""

    # Original source object, kept verbatim for the extra-fields view
    raw_record: dict[str, Any] = Field(default_factory=dict)

    def display_fields(self) -> list[str]:
        """Display fields in card order."""
        return [
            self.title,
            self.website,
            self.location,
            self.dates,
            self.frequency,
            self.deadlines,
            self.organization,
            self.description,
        ]

    def search_text(self) -> str:
        """Lowercased haystack for full-text search."""
        return " ".join(self.display_fields()).lower()


class PopularConference(BaseModel):
    """Curated popular-conference entry.

    Matched by exact identifier when the record has one, otherwise by
    title pattern (see enrichers.popularity).
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    identifier: Optional[str] = None
    title_pattern: Optional[re.Pattern] = None

    @model_validator(mode="after")
    def _require_matcher(self) -> "PopularConference":
        if not self.identifier and self.title_pattern is None:
            raise ValueError(f"Popular conference {self.key!r} needs an identifier or a title pattern")
        return self


@dataclass
class QuickLink:
    """Jump link to a popular conference present in the loaded data."""
    label: str
    href: str


@dataclass
class CacheEntry:
    """Per-category load result, kept for the whole session."""
    tag: str
    ok: bool
    items: list[NormalizedRecord] = field(default_factory=list)
    error: Optional[Exception] = None

    @classmethod
    def success(cls, tag: str, items: list[NormalizedRecord]) -> "CacheEntry":
        return cls(tag=tag, ok=True, items=items)

    @classmethod
    def failure(cls, tag: str, error: Exception) -> "CacheEntry":
        return cls(tag=tag, ok=False, error=error)


class LoadStatus(str, Enum):
    """Per-tag cache lifecycle."""

    UNREQUESTED = "unrequested"
    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


class SubMode(str, Enum):
    """Conference-only secondary filter."""

    ALL = "all"
    POPULAR = "popular"


class ViewMarker(str, Enum):
    """What kind of view the visible state represents."""

    NO_CATEGORY = "no-category"
    LOADING = "loading"
    RESULTS = "results"
    EMPTY = "empty"
    ERROR = "error"


class SelectionState(BaseModel):
    """User selection, mutated only by the browser state machine."""

    active_category_tag: Optional[str] = None
    conference_sub_mode: SubMode = SubMode.ALL
    search_query: str = ""

    @property
    def effective_query(self) -> str:
        return self.search_query.strip()


@dataclass
class ErrorInfo:
    """User-facing diagnostic for a category that failed to load."""
    category_tag: str
    category_label: str
    kind: str
    message: str
    hints: list[str] = field(default_factory=list)


@dataclass
class VisibleState:
    """Snapshot handed to the display layer."""
    records: list[NormalizedRecord]
    status_message: str
    marker: ViewMarker
    error_info: Optional[ErrorInfo] = None
    quick_links: list[QuickLink] = field(default_factory=list)
