"""Trading session distribution."""

from typing import Iterable

from tradeflow.constants import UNKNOWN_SESSION
from tradeflow.models import JournalEntry, SessionDistribution, SessionSlice


# Colors understood by rich; the last one is the neutral fallback
PALETTE = [
    "sky_blue2",
    "spring_green3",
    "hot_pink",
    "orange1",
    "medium_purple",
    "dark_cyan",
    "magenta",
    "chartreuse3",
    "slate_blue1",
    "grey62",
]


def text_hash(text: str) -> int:
    """Stable 32-bit string hash (h * 31 + c), returned as a non-negative int.

    Unlike the built-in hash() this does not change between processes.
    """
    h = 0
    for char in text:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def color_for_label(text: str) -> str:
    """Deterministic palette color for a label or tag."""
    if not text:
        return PALETTE[-1]
    return PALETTE[text_hash(text) % len(PALETTE)]


def session_label(session: str) -> str:
    """Bucket label for a session, "Unknown" when blank."""
    return session.strip() if session and session.strip() else UNKNOWN_SESSION


def session_distribution(entries: Iterable[JournalEntry]) -> SessionDistribution:
    """Count trades per session.

    Sessions appear in first-seen order. Missing, empty or whitespace-only
    sessions are counted under "Unknown".
    """
    counts: dict[str, int] = {}
    for entry in entries:
        label = session_label(entry.session)
        counts[label] = counts.get(label, 0) + 1

    return SessionDistribution(
        slices=[
            SessionSlice(label=label, count=count, color=color_for_label(label))
            for label, count in counts.items()
        ]
    )
