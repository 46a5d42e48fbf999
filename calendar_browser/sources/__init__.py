"""Category data sources."""

from calendar_browser.sources.errors import (
    CategoryLoadError,
    InvalidShapeError,
    MalformedJsonError,
    TransportError,
    UnexpectedContentTypeError,
    UnknownCategoryError,
)
from calendar_browser.sources.gateway import fetch_category_array, parse_category_payload, resolve_locator

__all__ = [
    "CategoryLoadError",
    "InvalidShapeError",
    "MalformedJsonError",
    "TransportError",
    "UnexpectedContentTypeError",
    "UnknownCategoryError",
    "fetch_category_array",
    "parse_category_payload",
    "resolve_locator",
]
