"""Filtering and search for the journal log."""

from datetime import date
from typing import Iterable, Optional

from tradeflow.models import JournalEntry, Outcome


def filter_entries(
    entries: Iterable[JournalEntry],
    search: Optional[str] = None,
    pair: Optional[str] = None,
    outcome: Optional[Outcome] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[JournalEntry]:
    """Filter journal entries for display.

    Args:
        entries: Entries to filter, in display order.
        search: Case-insensitive text matched against every field.
        pair: Exact pair to keep.
        outcome: Exact outcome to keep.
        date_from: Earliest trade date to keep (inclusive).
        date_to: Latest trade date to keep (inclusive).

    Returns:
        Matching entries, input order preserved.
    """
    term = (search or "").strip().lower()
    matches = []
    for entry in entries:
        if term and term not in entry.search_text:
            continue
        if pair and entry.pair != pair:
            continue
        if outcome is not None and entry.outcome is not Outcome(outcome):
            continue
        if date_from is not None and entry.date < date_from:
            continue
        if date_to is not None and entry.date > date_to:
            continue
        matches.append(entry)
    return matches


def unique_pairs(entries: Iterable[JournalEntry]) -> list[str]:
    """Sorted distinct pairs, for the pair filter."""
    return sorted({e.pair for e in entries})


def unique_outcomes(entries: Iterable[JournalEntry]) -> list[Outcome]:
    """Distinct outcomes in Win, Loss, Breakeven order."""
    seen = {e.outcome for e in entries}
    return [o for o in Outcome if o in seen]
