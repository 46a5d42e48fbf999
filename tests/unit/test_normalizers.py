"""Tests for the schema normalizer."""

import pytest

from calendar_browser.models import UNTITLED, NormalizedRecord
from calendar_browser.normalizers import FIELD_CANDIDATES, extra_fields, normalize_record, prettify_key


class TestFieldPrecedence:
    """First non-empty candidate wins, in table order."""

    @pytest.mark.parametrize("raw,field,expected", [
        ({"date": "May 2026", "schedule": "Mondays"}, "dates", "May 2026"),
        ({"schedule": "Mondays", "when": "Weekly"}, "dates", "Weekly"),
        ({"name": "Named", "id": "some-id"}, "title", "Named"),
        ({"title": "   ", "name": "Fallback"}, "title", "Fallback"),
        ({"event": "Event Night", "program": "Program X"}, "title", "Program X"),
        ({"url": "https://a.example", "link": "https://b.example"}, "website", "https://a.example"),
        ({"city": "Berlin", "where": "Online"}, "location", "Berlin"),
        ({"cadence": "Monthly"}, "frequency", "Monthly"),
        ({"deadline": "Jan 5", "submissionDeadline": "Jan 1"}, "deadlines", "Jan 1"),
        ({"degreeType": "PhD", "journal": "JOV"}, "organization", "JOV"),
        ({"summary": "Short", "notes": "Longer notes"}, "description", "Longer notes"),
    ])
    def test_candidate_order(self, conferences, raw: dict, field: str, expected: str):
        """The earlier candidate key takes precedence."""
        record = normalize_record(raw, conferences)
        assert getattr(record, field) == expected

    def test_values_are_trimmed(self, conferences):
        record = normalize_record({"title": "  VSS 2026 \n"}, conferences)
        assert record.title == "VSS 2026"

    def test_identifier_as_last_resort_title(self, conferences):
        record = normalize_record({"id": "abc-2026"}, conferences)
        assert record.title == "abc-2026"
        assert record.source_identifier == "abc-2026"


class TestDefaults:
    """Missing data degrades to empty strings, never errors."""

    def test_empty_record(self, conferences):
        record = normalize_record({}, conferences)
        assert record.title == UNTITLED
        for field in ["website", "location", "dates", "frequency", "deadlines",
                      "organization", "description", "source_identifier"]:
            assert getattr(record, field) == ""
        assert record.raw_record == {}

    def test_non_mapping_is_treated_as_empty(self, conferences):
        record = normalize_record(None, conferences)
        assert record.title == UNTITLED

    def test_null_values_skipped(self, conferences):
        record = normalize_record({"title": None, "name": "Named"}, conferences)
        assert record.title == "Named"

    def test_category_is_attached(self, conferences):
        record = normalize_record({"title": "X"}, conferences)
        assert record.category_tag == "conferences"
        assert record.category_label == "Conferences"


class TestStringification:
    """Non-string values are rendered, not dropped."""

    @pytest.mark.parametrize("value,expected", [
        (2026, "2026"),
        (3.0, "3"),
        (2.5, "2.5"),
        (True, "true"),
        (False, "false"),
        ({"start": "May 1"}, '{"start": "May 1"}'),
        (["May 1", "May 2"], '["May 1", "May 2"]'),
    ])
    def test_dates_value(self, conferences, value, expected: str):
        record = normalize_record({"dates": value}, conferences)
        assert record.dates == expected

    def test_numeric_identifier(self, conferences):
        record = normalize_record({"id": 42, "title": "T"}, conferences)
        assert record.source_identifier == "42"


class TestIdempotence:
    """Re-normalizing the retained raw record is a fixed point."""

    @pytest.mark.parametrize("raw", [
        {},
        {"id": "vision-sciences-society-vss-2026", "title": "VSS 2026", "dates": "May 2026"},
        {"program": "MSc Vision", "institutionProgram": "UCL", "fee": {"eur": 100}},
        {"title": "  padded  ", "when": 2026, "online": True},
    ])
    def test_fixed_point(self, conferences, raw: dict):
        first = normalize_record(raw, conferences)
        second = normalize_record(first.raw_record, conferences)
        assert second == first

    def test_title_never_empty(self, conferences):
        for raw in [{}, {"title": ""}, {"title": "  ", "name": None}, {"id": ""}]:
            assert normalize_record(raw, conferences).title


class TestExtraFields:
    """Unmapped raw fields are exposed for display."""

    def test_only_unmapped_fields(self):
        raw = {
            "title": "T",
            "id": "x-1",
            "fee": 10,
            "startTime": "9am",
            "empty": "",
            "missing": None,
            "meta": {"a": 1},
        }
        rows = dict(extra_fields(raw))
        assert set(rows) == {"Id", "Fee", "Start Time", "Meta"}
        assert rows["Fee"] == "10"
        assert '"a": 1' in rows["Meta"]

    def test_non_mapping(self):
        assert extra_fields(None) == []

    @pytest.mark.parametrize("key,label", [
        ("startTime", "Start Time"),
        ("fee_usd", "Fee Usd"),
        ("open-to", "Open To"),
        ("x", "X"),
    ])
    def test_prettify_key(self, key: str, label: str):
        assert prettify_key(key) == label


class TestFieldCandidates:
    """The candidate tables are the data-file contract."""

    def test_tables(self):
        assert FIELD_CANDIDATES["title"] == ["title", "name", "program", "event", "id"]
        assert FIELD_CANDIDATES["website"] == ["website", "url", "link"]
        assert FIELD_CANDIDATES["location"] == ["location", "city", "where"]
        assert FIELD_CANDIDATES["dates"] == ["dates", "date", "startDate", "start_date", "when", "schedule"]
        assert FIELD_CANDIDATES["frequency"] == ["frequency", "cadence"]
        assert FIELD_CANDIDATES["deadlines"] == [
            "submissionDeadlines", "submissionDeadline", "applicationDeadline",
            "deadlines", "deadline", "datesDeadline",
        ]
        assert FIELD_CANDIDATES["organization"] == [
            "organization", "organizer", "institution", "institutionProgram",
            "journal", "company", "department", "degreeType",
        ]
        assert FIELD_CANDIDATES["description"] == ["description", "details", "notes", "summary"]

    def test_search_text_covers_display_fields(self, conferences):
        record = normalize_record({"title": "T", "notes": "Neural Coding"}, conferences)
        assert isinstance(record, NormalizedRecord)
        assert "neural coding" in record.search_text()
