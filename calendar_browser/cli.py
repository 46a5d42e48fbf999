"""CLI for browsing calendar categories."""

import asyncio
from typing import Optional

import httpx
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.text import Text

from calendar_browser.browser import CalendarBrowser
from calendar_browser.cache import CategoryCache
from calendar_browser.categories import CATEGORIES, CONFERENCES_TAG, get_data_base, get_fetch_timeout
from calendar_browser.enrichers.popularity import POPULAR_CONFERENCES
from calendar_browser.models import NormalizedRecord, SubMode, ViewMarker, VisibleState
from calendar_browser.normalizers import extra_fields
from calendar_browser.sources.gateway import fetch_category_array

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="calendar-browser",
    help="Browse conference, job, funding and education calendars",
    add_completion=False,
)
console = Console()

DATA_BASE_HELP = "Data URL or directory (default: CALENDAR_DATA_BASE env var)"


def resolve_data_base(data_base: Optional[str]) -> str:
    return data_base or get_data_base()


async def _run(data_base: str, steps) -> CalendarBrowser:
    """Build a browser session over a shared HTTP client and apply steps."""
    async with httpx.AsyncClient(timeout=get_fetch_timeout(), follow_redirects=True) as client:

        async def fetcher(locator: str):
            return await fetch_category_array(locator, base=data_base, client=client)

        browser = CalendarBrowser(CategoryCache(fetcher=fetcher))
        for step in steps:
            result = step(browser)
            if asyncio.iscoroutine(result):
                await result
        return browser


def print_records(records: list[NormalizedRecord], limit: int = 20, details: bool = False) -> None:
    """Print a summary table of records."""
    shown = records[:limit] if limit > 0 else records
    table = Table(title=f"Showing {len(shown)} of {len(records)}")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Category", style="blue")
    table.add_column("Dates", style="magenta", max_width=24)
    table.add_column("Location", style="green", max_width=24)
    table.add_column("Deadlines", style="red", max_width=24)
    table.add_column("Organization", style="yellow", max_width=24)

    for rec in shown:
        table.add_row(
            Text(rec.title),
            Text(rec.category_label),
            Text(rec.dates or "-"),
            Text(rec.location or "-"),
            Text(rec.deadlines or "-"),
            Text(rec.organization or "-"),
        )
    console.print(table)

    if details:
        for rec in shown:
            console.print()
            console.print(Text(rec.title, style="bold"))
            if rec.website:
                console.print(Text(f"  Website: {rec.website}"))
            if rec.frequency:
                console.print(Text(f"  Frequency: {rec.frequency}"))
            if rec.description:
                console.print(Text(f"  {rec.description}"))
            for label, value in extra_fields(rec.raw_record):
                console.print(Text(f"  {label}: {value}", style="dim"))


def print_visible_state(view: VisibleState, limit: int = 20, details: bool = False) -> None:
    """Print the status line, then records or the error diagnostic."""
    console.print(Text(view.status_message, style="bold"))

    if view.error_info is not None:
        info = view.error_info
        console.print(Text(info.message, style="red"))
        console.print("[dim]Common causes:[/dim]")
        for hint in info.hints:
            console.print(Text(f"  - {hint}", style="dim"))
        return

    if view.quick_links:
        links = "  ".join(f"{link.label} ({link.href})" for link in view.quick_links)
        console.print(Text(f"Quick links: {links}", style="dim"))

    if view.records:
        print_records(view.records, limit=limit, details=details)


@app.command()
def categories():
    """List available categories."""
    table = Table(title="Categories")
    table.add_column("Tag", style="cyan")
    table.add_column("Label", style="green")
    table.add_column("File", style="dim")
    for cat in CATEGORIES:
        table.add_row(cat.tag, cat.label, cat.source_locator)
    console.print(table)


@app.command()
def show(
    tag: str = typer.Argument(..., help="Category tag (see `categories`)"),
    popular: bool = typer.Option(False, "--popular", "-p", help="Popular conferences only"),
    details: bool = typer.Option(False, "--details", "-d", help="Show descriptions and extra fields"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max records to print (0 = all)"),
    data_base: str = typer.Option(None, "--data-base", help=DATA_BASE_HELP),
):
    """Load one category and print its records."""
    if popular and tag != CONFERENCES_TAG:
        console.print("[yellow]--popular only applies to conferences; ignoring[/yellow]")

    steps = [lambda b: b.select_category(tag)]
    if popular:
        steps.append(lambda b: b.set_conference_sub_mode(SubMode.POPULAR.value))

    browser = asyncio.run(_run(resolve_data_base(data_base), steps))
    view = browser.get_visible_state()
    print_visible_state(view, limit=limit, details=details)

    if view.marker == ViewMarker.ERROR:
        raise typer.Exit(1)


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to find in any category"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max records to print (0 = all)"),
    details: bool = typer.Option(False, "--details", "-d", help="Show descriptions and extra fields"),
    data_base: str = typer.Option(None, "--data-base", help=DATA_BASE_HELP),
):
    """Search every category for a substring."""
    browser = asyncio.run(_run(resolve_data_base(data_base), [lambda b: b.set_search_query(query)]))
    print_visible_state(browser.get_visible_state(), limit=limit, details=details)


@app.command()
def popular(
    data_base: str = typer.Option(None, "--data-base", help=DATA_BASE_HELP),
):
    """Show curated popular conferences and whether the data contains them."""
    browser = asyncio.run(_run(resolve_data_base(data_base), [lambda b: b.select_category(CONFERENCES_TAG)]))
    view = browser.get_visible_state()
    if view.marker == ViewMarker.ERROR:
        print_visible_state(view)
        raise typer.Exit(1)

    found = {link.label: link.href for link in browser.quick_links}
    table = Table(title="Popular Conferences")
    table.add_column("Label", style="cyan")
    table.add_column("Identifier", style="dim")
    table.add_column("Link", style="green")
    for entry in POPULAR_CONFERENCES:
        table.add_row(entry.label, entry.identifier or "-", found.get(entry.label, "[red]missing[/red]"))
    console.print(table)
    console.print(f"  Matched: {len(found)}/{len(POPULAR_CONFERENCES)}")


if __name__ == "__main__":
    app()
