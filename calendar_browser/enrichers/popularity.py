"""Popular-conference matching.

Two tiers, never merged into one predicate:

1. A record with a source identifier is popular only if that identifier is
   in the curated identifier set. Title patterns are not consulted, so a
   loose acronym pattern ("AVA") cannot promote an unrelated record such as
   "ava-xmas-2025".
2. A record without an identifier is matched by title, and only against
   curated entries that have no identifier of their own.

The curated table needs a manual update whenever a conference gets a new
yearly identifier.
"""

import re
from typing import Optional

from rich.console import Console

from calendar_browser.models import NormalizedRecord, PopularConference, QuickLink

console = Console()

POPULAR_CONFERENCES: list[PopularConference] = [
    PopularConference(
        key="apa", label="APA",
        identifier="american-psychological-association-apa-2026",
        title_pattern=re.compile(r"\bamerican psychological association\b|\bapa\b", re.I),
    ),
    PopularConference(
        key="apcv", label="APCV",
        identifier="epc-apcv-2026",
        title_pattern=re.compile(r"\bapcv\b|\bepc\b", re.I),
    ),
    PopularConference(
        key="aps", label="APS",
        title_pattern=re.compile(r"\bassociation for psychological science\b|\baps\b", re.I),
    ),
    PopularConference(
        key="arvo", label="ARVO",
        title_pattern=re.compile(r"\bassociation for research in vision and ophthalmology\b|\barvo\b", re.I),
    ),
    PopularConference(
        key="ava", label="AVA",
        identifier="applied-vision-association-ava-2026",
        title_pattern=re.compile(r"\bapplied vision association\b|\bava\b", re.I),
    ),
    PopularConference(
        key="bavrd", label="BAVRD",
        title_pattern=re.compile(r"\bbay area vision research day\b|\bbavrd\b", re.I),
    ),
    PopularConference(
        key="ecvp", label="ECVP",
        identifier="european-conference-on-visual-perception-ecvp-2026",
        title_pattern=re.compile(r"\beuropean conference on visual perception\b|\becvp\b", re.I),
    ),
    PopularConference(
        key="gruppo-del-colore", label="Gruppo del Colore",
        identifier="gruppo-del-colore-annual-meeting-2026",
        title_pattern=re.compile(r"\bgruppo del colore\b", re.I),
    ),
    PopularConference(
        key="hvei", label="HVEI",
        identifier="human-vision-and-electronic-imaging-hvei-2026",
        title_pattern=re.compile(r"\bhuman vision and electronic imaging\b|\bhvei\b", re.I),
    ),
    PopularConference(
        key="icvs", label="ICVS",
        identifier="international-colour-vision-society-icvs-2026",
        title_pattern=re.compile(r"\binternational (colour|color) vision society\b|\bicvs\b", re.I),
    ),
    PopularConference(
        key="modvis", label="MODVIS",
        title_pattern=re.compile(r"\bmodvis\b|\bmodels in vision science\b", re.I),
    ),
    PopularConference(
        key="optica-fall-vision", label="Optica Fall Vision",
        identifier="optica-fall-vision-meeting-2026",
        title_pattern=re.compile(r"\boptica\b.*\bfall\b.*\bvision\b", re.I),
    ),
    PopularConference(
        key="psychonomics", label="Psychonomics",
        identifier="psychonomic-society-annual-meeting-2026",
        title_pattern=re.compile(r"\bpsychonomic\b|\bpsychonomics\b", re.I),
    ),
    PopularConference(
        key="sfn", label="SfN",
        identifier="society-for-neuroscience-sfn-2026",
        title_pattern=re.compile(r"\bsociety for neuroscience\b|\bsfn\b", re.I),
    ),
    PopularConference(
        key="vsac", label="VSAC",
        identifier="visual-science-art-conference-vsac-2026",
        title_pattern=re.compile(r"\bvisual science art conference\b|\bvsac\b", re.I),
    ),
    PopularConference(
        key="vss", label="VSS",
        identifier="vision-sciences-society-vss-2026",
        title_pattern=re.compile(r"\bvision sciences society\b|\bvss\b", re.I),
    ),
]


def curated_identifiers(popular_set: list[PopularConference]) -> set[str]:
    """Identifiers of curated entries that have one."""
    return {p.identifier for p in popular_set if p.identifier}


def is_popular(
    record: NormalizedRecord,
    popular_set: Optional[list[PopularConference]] = None,
) -> bool:
    """Check whether a conference record belongs to the curated popular set."""
    if popular_set is None:
        popular_set = POPULAR_CONFERENCES

    # Tier 1: identifier decides alone
    if record.source_identifier:
        return record.source_identifier in curated_identifiers(popular_set)

    # Tier 2: title fallback, identifier-less entries only
    return any(
        p.title_pattern.search(record.title)
        for p in popular_set
        if not p.identifier and p.title_pattern is not None
    )


def matches_entry(record: NormalizedRecord, entry: PopularConference) -> bool:
    """Same tiering as is_popular, restricted to one curated entry."""
    if record.source_identifier:
        return bool(entry.identifier) and record.source_identifier == entry.identifier
    if entry.identifier or entry.title_pattern is None:
        return False
    return bool(entry.title_pattern.search(record.title))


def filter_popular(
    records: list[NormalizedRecord],
    popular_set: Optional[list[PopularConference]] = None,
) -> list[NormalizedRecord]:
    """Popular subset of a conference list, in source order."""
    return [r for r in records if is_popular(r, popular_set)]


def build_quick_links(
    records: list[NormalizedRecord],
    popular_set: Optional[list[PopularConference]] = None,
) -> list[QuickLink]:
    """Quick links for curated conferences present in the loaded list.

    Curated entries may reference conferences not in the data yet; those are
    logged and skipped.
    """
    if popular_set is None:
        popular_set = POPULAR_CONFERENCES

    links: list[QuickLink] = []
    missing: list[str] = []

    for entry in popular_set:
        match = next((r for r in records if matches_entry(r, entry)), None)
        if match is None:
            missing.append(entry.label)
            continue
        anchor = match.source_identifier or f"popular-{entry.key}"
        links.append(QuickLink(label=entry.label, href=f"#{anchor}"))

    for label in missing:
        console.print(f"[yellow]Popular conference not found in data yet: {label}[/yellow]")

    console.print(f"[dim]Popular conferences matched: {len(links)}/{len(popular_set)}[/dim]")
    return links
