"""Filter/search state machine.

Holds the user's selection and derives the visible record set from the
category cache. The visible set is recomputed from scratch after every
transition and every relevant load completion; it is never patched.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from rich.console import Console

from calendar_browser.cache import CategoryCache
from calendar_browser.categories import CONFERENCES_TAG, get_category
from calendar_browser.enrichers.popularity import POPULAR_CONFERENCES, build_quick_links, filter_popular
from calendar_browser.models import (
    ErrorInfo,
    NormalizedRecord,
    PopularConference,
    QuickLink,
    SelectionState,
    SubMode,
    ViewMarker,
    VisibleState,
)
from calendar_browser.sources.errors import error_kind, remediation_hints

console = Console()

NO_CATEGORY_MESSAGE = "Select a category above to view items."
SEARCHING_MESSAGE = "Searching all categories…"


@dataclass
class SelectCategory:
    tag: Optional[str]


@dataclass
class SetSubMode:
    mode: str


@dataclass
class SetQuery:
    text: str


Action = Union[SelectCategory, SetSubMode, SetQuery]


def _label_for(cache: CategoryCache, tag: str) -> str:
    cat = get_category(tag, cache.categories)
    return cat.label if cat else tag


def _error_info(cache: CategoryCache, tag: str, error: Exception) -> ErrorInfo:
    return ErrorInfo(
        category_tag=tag,
        category_label=_label_for(cache, tag),
        kind=error_kind(error),
        message=str(error),
        hints=remediation_hints(error),
    )


def search_records(records: list[NormalizedRecord], query: str) -> list[NormalizedRecord]:
    """Case-insensitive substring match over all display fields."""
    needle = query.strip().lower()
    if not needle:
        return list(records)
    return [r for r in records if needle in r.search_text()]


def _derive_search(state: SelectionState, cache: CategoryCache) -> VisibleState:
    query = state.effective_query
    pending = [tag for tag in cache.tags if cache.get(tag) is None]
    if pending:
        return VisibleState(records=[], status_message=SEARCHING_MESSAGE, marker=ViewMarker.LOADING)

    pool: list[NormalizedRecord] = []
    for tag in cache.loaded_tags():
        pool.extend(cache.get(tag).items)
    matches = search_records(pool, query)

    message = f'Found {len(matches)} matches for "{query}".'
    failed = cache.failed_tags()
    if failed:
        labels = ", ".join(_label_for(cache, tag) for tag in failed)
        message += f" ({len(failed)} categories failed to load: {labels})"

    return VisibleState(
        records=matches,
        status_message=message,
        marker=ViewMarker.RESULTS if matches else ViewMarker.EMPTY,
    )


def derive_visible_state(
    state: SelectionState,
    cache: CategoryCache,
    popular_set: Optional[list[PopularConference]] = None,
    quick_links: Optional[list[QuickLink]] = None,
) -> VisibleState:
    """Pure derivation of the visible set from selection + cache contents."""
    if state.effective_query:
        return _derive_search(state, cache)

    tag = state.active_category_tag
    if not tag:
        return VisibleState(records=[], status_message=NO_CATEGORY_MESSAGE, marker=ViewMarker.NO_CATEGORY)

    label = _label_for(cache, tag)
    entry = cache.get(tag)
    if entry is None:
        return VisibleState(
            records=[],
            status_message=f"Loading all items in {label}…",
            marker=ViewMarker.LOADING,
        )

    if not entry.ok:
        return VisibleState(
            records=[],
            status_message=f"Could not load {label}.",
            marker=ViewMarker.ERROR,
            error_info=_error_info(cache, tag, entry.error),
        )

    items = entry.items
    suffix = ""
    links: list[QuickLink] = []
    if tag == CONFERENCES_TAG:
        links = list(quick_links or [])
        if state.conference_sub_mode == SubMode.POPULAR:
            items = filter_popular(items, popular_set)
            suffix = " (Popular Conferences)"

    if not items:
        return VisibleState(
            records=[],
            status_message=f"No items found for {label}{suffix} yet.",
            marker=ViewMarker.EMPTY,
            quick_links=links,
        )

    return VisibleState(
        records=list(items),
        status_message=f"Loaded {len(items)} items in {label}.",
        marker=ViewMarker.RESULTS,
        quick_links=links,
    )


class CalendarBrowser:
    """Selection state machine over an injected CategoryCache.

    Every transition updates the selection synchronously, publishes the
    derived view, and only then suspends on loading. A load that finishes
    after the user has moved on is dropped instead of published.
    """

    def __init__(
        self,
        cache: CategoryCache,
        popular_set: Optional[list[PopularConference]] = None,
        on_change: Optional[Callable[[VisibleState], None]] = None,
    ):
        self.cache = cache
        self.popular_set = popular_set if popular_set is not None else POPULAR_CONFERENCES
        self.on_change = on_change
        self.state = SelectionState()
        self._quick_links: Optional[list[QuickLink]] = None
        self._visible = derive_visible_state(self.state, cache, self.popular_set)

    # ---- read side ----

    def get_visible_state(self) -> VisibleState:
        """Most recently published view."""
        return self._visible

    @property
    def quick_links(self) -> list[QuickLink]:
        return list(self._quick_links or [])

    # ---- transitions ----

    async def handle(self, action: Action) -> None:
        """Dispatch a UI command."""
        if isinstance(action, SelectCategory):
            await self.select_category(action.tag)
        elif isinstance(action, SetSubMode):
            self.set_conference_sub_mode(action.mode)
        elif isinstance(action, SetQuery):
            await self.set_search_query(action.text)
        else:
            raise TypeError(f"Unsupported action: {action!r}")

    async def select_category(self, tag: Optional[str]) -> None:
        tag = (tag or "").strip()

        if not tag:
            self.state = SelectionState()
            self._publish()
            return

        self.state = SelectionState(active_category_tag=tag)
        self._publish()

        await self.cache.ensure_loaded(tag)

        if self._is_relevant(tag):
            self._index_conferences()
            self._publish()
        else:
            console.print(f"[dim]Dropping stale load for {tag} (now viewing {self._describe()})[/dim]")

    def set_conference_sub_mode(self, mode: str) -> None:
        """Switch all/popular; ignored outside conferences or during a search."""
        if self.state.active_category_tag != CONFERENCES_TAG:
            return
        if self.state.effective_query:
            return
        try:
            sub_mode = SubMode(mode)
        except ValueError:
            return

        self.state = self.state.model_copy(update={"conference_sub_mode": sub_mode})
        self._publish()

    async def set_search_query(self, text: str) -> None:
        text = text or ""
        self.state = self.state.model_copy(update={"search_query": text})

        query = self.state.effective_query
        if not query:
            self._publish()
            return

        # Kick off every load before the first suspension
        for tag in self.cache.tags:
            self.cache.start_load(tag)
        self._publish()

        await self.cache.ensure_all_loaded()

        if self.state.effective_query == query:
            self._index_conferences()
            self._publish()
        else:
            console.print(f'[dim]Dropping stale search results for "{query}"[/dim]')

    # ---- internals ----

    def _is_relevant(self, tag: str) -> bool:
        """A completed load may be shown only if the user still wants it."""
        if self.state.effective_query:
            return False
        return self.state.active_category_tag == tag

    def _describe(self) -> str:
        if self.state.effective_query:
            return f'search "{self.state.effective_query}"'
        return self.state.active_category_tag or "nothing"

    def _index_conferences(self) -> None:
        """Build popular quick links once, when conferences first loads."""
        if self._quick_links is not None:
            return
        entry = self.cache.get(CONFERENCES_TAG)
        if entry is None or not entry.ok:
            return
        self._quick_links = build_quick_links(entry.items, self.popular_set)

    def _publish(self) -> None:
        self._visible = derive_visible_state(self.state, self.cache, self.popular_set, self._quick_links)
        if self.on_change is not None:
            self.on_change(self._visible)

