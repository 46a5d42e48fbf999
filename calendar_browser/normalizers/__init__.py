"""Record normalizers."""

from calendar_browser.normalizers.fields import (
    FIELD_CANDIDATES,
    coalesce,
    extra_fields,
    normalize_record,
    normalize_records,
    prettify_key,
)

__all__ = [
    "FIELD_CANDIDATES",
    "coalesce",
    "extra_fields",
    "normalize_record",
    "normalize_records",
    "prettify_key",
]
