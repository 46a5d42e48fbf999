"""Fetch gateway: retrieve and strictly validate one category's JSON array.

Validation runs in a fixed order and fails fast:

1. transport / HTTP status
2. HTML payload (static hosts often answer a bad path with a 200 fallback page)
3. JSON syntax
4. top-level array
5. every element is an object
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin

import httpx
from rich.console import Console

from calendar_browser.categories import get_data_base, get_fetch_timeout
from calendar_browser.sources.errors import (
    InvalidShapeError,
    MalformedJsonError,
    TransportError,
    UnexpectedContentTypeError,
)

console = Console()

HTML_MARKERS = ("<!doctype", "<html")

REQUEST_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
}


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def resolve_locator(locator: str, base: Optional[str] = None) -> str:
    """Join a category locator to the data base (URL or directory)."""
    if is_remote(locator):
        return locator
    base = base if base is not None else get_data_base()
    if is_remote(base):
        if not base.endswith("/"):
            base += "/"
        try:
            return urljoin(base, locator)
        except ValueError as e:
            raise TransportError(f"Invalid data base URL {base}: {e}", locator=locator) from e
    return str(Path(base) / locator)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


async def _read_remote(url: str, client: Optional[httpx.AsyncClient]) -> str:
    """GET a URL and return the body text, raising TransportError on failure."""
    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=get_fetch_timeout(),
                follow_redirects=True,
            ) as own_client:
                response = await own_client.get(url, headers=REQUEST_HEADERS)
        else:
            response = await client.get(url, headers=REQUEST_HEADERS)
    except httpx.TimeoutException as e:
        raise TransportError(f"Timed out loading {url}: {e}", locator=url) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"Failed to load {url}: {type(e).__name__}: {e}", locator=url) from e

    if not response.is_success:
        raise TransportError(
            f"Failed to load {url} (HTTP {response.status_code})",
            locator=url,
            status_code=response.status_code,
        )
    return response.text


async def _read_local(path: str) -> str:
    """Read a local data file without blocking the event loop."""
    try:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
    except FileNotFoundError as e:
        raise TransportError(f"Failed to load {path} (file not found)", locator=path) from e
    except UnicodeDecodeError as e:
        raise MalformedJsonError(f"Invalid JSON in {path}: {e}", locator=path, detail=str(e)) from e
    except OSError as e:
        raise TransportError(f"Failed to load {path}: {e}", locator=path) from e


def parse_category_payload(text: str, locator: str) -> list[dict[str, Any]]:
    """Validate a payload as a JSON array of objects."""
    name = locator.rsplit("/", 1)[-1]
    trimmed = text.lstrip("\ufeff").strip()

    if trimmed[:16].lower().startswith(HTML_MARKERS):
        raise UnexpectedContentTypeError(
            f"Expected JSON but got HTML from {locator} (wrong publish folder/path?)",
            locator=locator,
        )

    try:
        parsed = json.loads(trimmed, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedJsonError(f"Invalid JSON in {name}: {e}", locator=locator, detail=str(e)) from e

    if not isinstance(parsed, list):
        raise InvalidShapeError(
            f"{name} must be a JSON array (e.g. [] or [{{...}}])",
            locator=locator,
        )

    for i, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise InvalidShapeError(
                f"{name}[{i}] must be an object {{ ... }}",
                locator=locator,
                index=i,
            )

    return parsed


async def fetch_category_array(
    locator: str,
    base: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> list[dict[str, Any]]:
    """Fetch one category file and return its records.

    Args:
        locator: File name (or absolute URL) of the category data
        base: Data base URL or directory (default: CALENDAR_DATA_BASE)
        client: Shared httpx client; a short-lived one is created if omitted

    Raises:
        CategoryLoadError subclass describing what went wrong.
    """
    location = resolve_locator(locator, base)
    console.print(f"[dim]Fetching {location}[/dim]")

    if is_remote(location):
        text = await _read_remote(location, client)
    else:
        text = await _read_local(location)

    records = parse_category_payload(text, location)
    console.print(f"[dim]Fetched {len(records)} records from {location}[/dim]")
    return records
