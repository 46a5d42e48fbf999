"""On-demand category cache.

Each tag moves Unrequested -> Pending -> Loaded | Failed, and both end
states last for the whole session: no TTL, no retry. At most one load per
tag is ever in flight; later callers await the same task.
"""

import asyncio
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from rich.console import Console
from rich.markup import escape

from calendar_browser.categories import CATEGORIES, get_category
from calendar_browser.models import CacheEntry, CategoryDescriptor, LoadStatus, NormalizedRecord
from calendar_browser.normalizers import normalize_records
from calendar_browser.sources.errors import CategoryLoadError, UnknownCategoryError
from calendar_browser.sources.gateway import fetch_category_array

console = Console()

Fetcher = Callable[[str], Awaitable[list[dict[str, Any]]]]
Normalizer = Callable[[list[Any], CategoryDescriptor], list[NormalizedRecord]]


class CategoryCache:
    """Session-lifetime store of category load results, keyed by tag."""

    def __init__(
        self,
        categories: Optional[list[CategoryDescriptor]] = None,
        fetcher: Optional[Fetcher] = None,
        data_base: Optional[str] = None,
        normalizer: Normalizer = normalize_records,
    ):
        self.categories = list(categories) if categories is not None else list(CATEGORIES)
        self._fetcher = fetcher or partial(fetch_category_array, base=data_base)
        self._normalizer = normalizer
        self._entries: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Task] = {}

    @property
    def tags(self) -> list[str]:
        return [cat.tag for cat in self.categories]

    def get(self, tag: str) -> Optional[CacheEntry]:
        """Completed entry for a tag, or None while unrequested/pending."""
        return self._entries.get(tag)

    def status(self, tag: str) -> LoadStatus:
        entry = self._entries.get(tag)
        if entry is not None:
            return LoadStatus.LOADED if entry.ok else LoadStatus.FAILED
        if tag in self._pending:
            return LoadStatus.PENDING
        return LoadStatus.UNREQUESTED

    def loaded_tags(self) -> list[str]:
        """Successfully loaded tags, in category order."""
        return [tag for tag in self.tags if (e := self._entries.get(tag)) is not None and e.ok]

    def failed_tags(self) -> list[str]:
        return [tag for tag in self.tags if (e := self._entries.get(tag)) is not None and not e.ok]

    def start_load(self, tag: str) -> Optional[asyncio.Task]:
        """Mark a tag pending and schedule its load, without suspending.

        Returns the in-flight task, or None if the tag is already settled.
        """
        if tag in self._entries:
            return None
        task = self._pending.get(tag)
        if task is None:
            task = asyncio.ensure_future(self._load(tag))
            self._pending[tag] = task
        return task

    async def ensure_loaded(self, tag: str) -> None:
        """Load a tag once; concurrent callers share the same in-flight load."""
        task = self.start_load(tag)
        if task is None:
            return
        # Shielded so one abandoned caller cannot cancel the shared load
        await asyncio.shield(task)

    async def ensure_all_loaded(self) -> None:
        """Load every category concurrently."""
        await asyncio.gather(*(self.ensure_loaded(tag) for tag in self.tags))

    async def _load(self, tag: str) -> None:
        try:
            cat = get_category(tag, self.categories)
            if cat is None:
                raise UnknownCategoryError(f"Unknown category tag: {tag}")

            raw = await self._fetcher(cat.source_locator)
            items = self._normalizer(raw, cat)
            self._entries[tag] = CacheEntry.success(tag, items)
            console.print(f"[green]Loaded {len(items)} items in {cat.label}[/green]")
        except CategoryLoadError as e:
            self._entries[tag] = CacheEntry.failure(tag, e)
            console.print(f"[red]Could not load {tag}: {escape(str(e))}[/red]")
        except Exception as e:
            # Any other error still settles the tag as Failed
            self._entries[tag] = CacheEntry.failure(tag, e)
            console.print(f"[red]Could not load {tag}: {type(e).__name__}: {escape(str(e))}[/red]")
        finally:
            self._pending.pop(tag, None)
