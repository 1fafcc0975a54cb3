"""Equity curve of cumulative risk/reward."""

from datetime import date, timedelta
from typing import Iterable, Optional

from tradeflow.models import EquityCurve, EquityPoint, JournalEntry, Outcome


def rr_contribution(entry: JournalEntry) -> float:
    """Signed RR a single trade adds to the running total.

    Wins add their RR, losses subtract it. Breakevens and trades without
    a positive RR contribute nothing.
    """
    if entry.rr_ratio is None or entry.rr_ratio <= 0:
        return 0.0
    if entry.outcome is Outcome.WIN:
        return entry.rr_ratio
    if entry.outcome is Outcome.LOSS:
        return -entry.rr_ratio
    return 0.0


def build_equity_curve(
    entries: Iterable[JournalEntry],
    today: Optional[date] = None,
) -> EquityCurve:
    """Build the cumulative RR curve from journal entries.

    Entries are sorted by trade date (stable, so same-day trades keep
    their input order). A baseline point at 0 is dated one day before the
    first trade, or today when there are none.

    Args:
        entries: Journal entries in any order.
        today: Baseline date for an empty journal. Defaults to date.today().

    Returns:
        EquityCurve with len(entries) + 1 points.
    """
    ordered = sorted(entries, key=lambda e: e.date)

    start = ordered[0].date - timedelta(days=1) if ordered else (today or date.today())
    points = [EquityPoint(index=0, cumulative_rr=0.0, date=start, label="Start")]

    running = 0.0
    for index, entry in enumerate(ordered, 1):
        running += rr_contribution(entry)
        points.append(
            EquityPoint(
                index=index,
                cumulative_rr=round(running, 2),
                date=entry.date,
                label=f"Trade {index} ({entry.date.strftime('%b %d')})",
            )
        )

    return EquityCurve(points=points, entry_count=len(ordered))
