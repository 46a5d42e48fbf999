"""Schema normalizer: coalesce heterogeneous raw records into NormalizedRecord.

Each display field has an ordered list of candidate raw keys. The first key
whose trimmed string value is non-empty wins, so the order decides which
source vocabulary takes precedence when a record carries several of them
(e.g. "date" beats "schedule").
"""

import json
import re
from typing import Any, Mapping, Optional

from calendar_browser.models import UNTITLED, CategoryDescriptor, NormalizedRecord

# Candidate raw keys per display field, in precedence order
TITLE_FIELDS = ["title", "name", "program", "event", "id"]
WEBSITE_FIELDS = ["website", "url", "link"]
LOCATION_FIELDS = ["location", "city", "where"]
DATES_FIELDS = ["dates", "date", "startDate", "start_date", "when", "schedule"]
FREQUENCY_FIELDS = ["frequency", "cadence"]
DEADLINES_FIELDS = [
    "submissionDeadlines",
    "submissionDeadline",
    "applicationDeadline",
    "deadlines",
    "deadline",
    "datesDeadline",
]
ORGANIZATION_FIELDS = [
    "organization",
    "organizer",
    "institution",
    "institutionProgram",
    "journal",
    "company",
    "department",
    "degreeType",
]
DESCRIPTION_FIELDS = ["description", "details", "notes", "summary"]
IDENTIFIER_FIELDS = ["id"]

FIELD_CANDIDATES: dict[str, list[str]] = {
    "title": TITLE_FIELDS,
    "website": WEBSITE_FIELDS,
    "location": LOCATION_FIELDS,
    "dates": DATES_FIELDS,
    "frequency": FREQUENCY_FIELDS,
    "deadlines": DEADLINES_FIELDS,
    "organization": ORGANIZATION_FIELDS,
    "description": DESCRIPTION_FIELDS,
}

# Raw keys already surfaced by a display field ("id" stays visible as an extra)
MAPPED_FIELDS = {
    key
    for keys in FIELD_CANDIDATES.values()
    for key in keys
    if key != "id"
}


def stringify(value: Any) -> str:
    """Render a raw JSON value as display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def coalesce(raw: Mapping[str, Any], keys: list[str]) -> str:
    """First non-empty trimmed value among `keys`, or ""."""
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        text = stringify(value).strip()
        if text:
            return text
    return ""


def normalize_record(raw: Any, category: CategoryDescriptor) -> NormalizedRecord:
    """Map one raw record onto the display schema. Never raises."""
    if not isinstance(raw, Mapping):
        raw = {}

    values = {name: coalesce(raw, keys) for name, keys in FIELD_CANDIDATES.items()}
    values["title"] = values["title"] or UNTITLED

    return NormalizedRecord(
        category_tag=category.tag,
        category_label=category.label,
        source_identifier=coalesce(raw, IDENTIFIER_FIELDS),
        raw_record=dict(raw),
        **values,
    )


def normalize_records(raws: list[Any], category: CategoryDescriptor) -> list[NormalizedRecord]:
    """Normalize a whole category file, preserving source order."""
    return [normalize_record(raw, category) for raw in raws]


def prettify_key(key: str) -> str:
    """Turn a raw key into a label: "startTime" / "fee_usd" -> "Start Time" / "Fee Usd"."""
    text = re.sub(r"[_-]+", " ", str(key))
    text = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def extra_fields(raw: Optional[Mapping[str, Any]]) -> list[tuple[str, str]]:
    """Raw fields not surfaced by any display field, as (label, value) rows."""
    if not isinstance(raw, Mapping):
        return []

    rows = []
    for key, value in raw.items():
        if key in MAPPED_FIELDS:
            continue
        if value is None or value == "":
            continue
        if isinstance(value, (dict, list)):
            text = json.dumps(value, indent=2, ensure_ascii=False)
        else:
            text = stringify(value)
        rows.append((prettify_key(key), text))
    return rows
