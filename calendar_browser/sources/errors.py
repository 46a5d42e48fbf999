"""Category load errors.

Each kind implies a different fix on the data-hosting side, so they are
kept distinct instead of surfacing a generic parse exception.
"""

from typing import Optional

# Shown for every failed category, whatever the kind
GENERIC_HINTS = [
    "A JSON file has invalid JSON (e.g., NaN or trailing commas)",
    "A filename doesn't match exactly (case-sensitive on the host)",
    "Wrong publish folder/path (HTML returned instead of JSON)",
]


class CategoryLoadError(Exception):
    """Base class for failures while loading one category file."""

    kind = "load"
    hint = "Reload the page to try again."

    def __init__(self, message: str, locator: str = ""):
        super().__init__(message)
        self.locator = locator

    @property
    def message(self) -> str:
        return str(self)


class TransportError(CategoryLoadError):
    """Network failure, non-2xx response, or unreadable local file."""

    kind = "transport"
    hint = "Check that the file is published at the expected URL and the host is reachable."

    def __init__(self, message: str, locator: str = "", status_code: Optional[int] = None):
        super().__init__(message, locator)
        self.status_code = status_code


class UnexpectedContentTypeError(CategoryLoadError):
    """HTML page served where a JSON document was expected."""

    kind = "unexpected-content-type"
    hint = "The host returned an HTML fallback page; check the publish folder and file path."


class MalformedJsonError(CategoryLoadError):
    """Payload is not valid JSON."""

    kind = "malformed-json"
    hint = "Validate the file with a JSON linter; NaN, comments and trailing commas are not JSON."

    def __init__(self, message: str, locator: str = "", detail: str = ""):
        super().__init__(message, locator)
        self.detail = detail


class InvalidShapeError(CategoryLoadError):
    """Valid JSON, but not an array of objects."""

    kind = "invalid-shape"
    hint = "The file must be a JSON array of objects, e.g. [] or [{...}]."

    def __init__(self, message: str, locator: str = "", index: Optional[int] = None):
        super().__init__(message, locator)
        self.index = index


class UnknownCategoryError(CategoryLoadError):
    """Tag not present in the category table."""

    kind = "unknown-category"
    hint = "Use one of the configured category tags."


def remediation_hints(error: Exception) -> list[str]:
    """Kind-specific hint first, then the generic checklist."""
    hints = []
    if isinstance(error, CategoryLoadError):
        hints.append(error.hint)
    hints.extend(GENERIC_HINTS)
    return hints


def error_kind(error: Exception) -> str:
    if isinstance(error, CategoryLoadError):
        return error.kind
    return type(error).__name__.lower()
