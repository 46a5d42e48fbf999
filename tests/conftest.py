"""Shared test fixtures and configuration."""

import asyncio
from collections import Counter
from typing import Any, Union

import pytest

from calendar_browser.categories import get_category
from calendar_browser.models import CategoryDescriptor


class FakeFetcher:
    """In-memory stand-in for the fetch gateway.

    Payloads map locator -> list of raw records or an exception to raise.
    Gated locators block until their event is set.
    """

    def __init__(self, payloads: dict[str, Union[list[dict[str, Any]], Exception]]):
        self.payloads = payloads
        self.calls: Counter = Counter()
        self.gates: dict[str, asyncio.Event] = {}

    def gate(self, locator: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[locator] = event
        return event

    async def __call__(self, locator: str) -> list[dict[str, Any]]:
        self.calls[locator] += 1
        await asyncio.sleep(0)
        gate = self.gates.get(locator)
        if gate is not None:
            await gate.wait()
        payload = self.payloads.get(locator, [])
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture
def conferences() -> CategoryDescriptor:
    return get_category("conferences")


@pytest.fixture
def vss_raw() -> dict:
    """Conference record carrying a curated identifier."""
    return {
        "id": "vision-sciences-society-vss-2026",
        "title": "VSS 2026",
        "dates": "May 2026",
    }


@pytest.fixture
def sample_payloads(vss_raw) -> dict:
    """One small file per category used by the browser tests."""
    return {
        "conferences.json": [
            vss_raw,
            {
                "id": "ava-xmas-2025",
                "title": "AVA Christmas Meeting",
                "date": "December 2025",
                "location": "London, UK",
            },
        ],
        "jobs.json": [
            {
                "name": "Postdoc in Colour Vision",
                "company": "University of Example",
                "deadline": "2026-03-01",
            },
        ],
        "funding.json": [
            {
                "program": "Early Career Fellowship",
                "details": "Supports research on Neural Coding of natural scenes.",
                "organizer": "Example Foundation",
            },
        ],
    }


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher
