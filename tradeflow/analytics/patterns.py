"""Recurring tag-combination analysis.

Trades are grouped by the combination of POI tags, reaction-to-POI tags,
entry type and premarket-condition tags. Tag lists are compared as sets,
so the order tags were picked in never matters. Every combination seen at
least once becomes a group; the confidence score communicates how much
the journal supports it.

Confidence is ``edge / (edge + drag + PRIOR)`` where each win adds
``1 + rr`` to edge and each loss adds ``1 + rr`` to drag. Breakevens are
neutral. PRIOR keeps a single lucky trade from scoring near 1.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from tradeflow.models import (
    Direction,
    ExampleTrade,
    JournalEntry,
    Outcome,
    SuggestedStrategy,
)


PRIOR = 2.0


@dataclass(frozen=True)
class PatternKey:
    """Grouping key of a tag combination."""

    poi: frozenset[str]
    reaction_to_poi: frozenset[str]
    entry_type: str
    premarket_condition: frozenset[str]

    @classmethod
    def from_entry(cls, entry: JournalEntry) -> "PatternKey":
        return cls(
            poi=frozenset(entry.poi),
            reaction_to_poi=frozenset(entry.reaction_to_poi),
            entry_type=entry.entry_type,
            premarket_condition=frozenset(entry.premarket_condition),
        )

    def sort_key(self) -> tuple:
        return (
            sorted(self.poi),
            sorted(self.reaction_to_poi),
            self.entry_type,
            sorted(self.premarket_condition),
        )


def confidence_score(
    win_rrs: Iterable[Optional[float]],
    loss_rrs: Iterable[Optional[float]] = (),
) -> float:
    """Score a tag combination from the RR of its wins and losses.

    A missing RR counts as 0. The result is in [0, 1) and grows strictly
    with every additional win and with the RR of each win.

    Args:
        win_rrs: RR ratio of each winning trade.
        loss_rrs: RR ratio of each losing trade.

    Returns:
        Confidence between 0 and 1.
    """
    edge = sum(1.0 + (rr or 0.0) for rr in win_rrs)
    drag = sum(1.0 + (rr or 0.0) for rr in loss_rrs)
    return edge / (edge + drag + PRIOR)


@dataclass
class PatternGroup:
    """Journal entries sharing one tag combination."""

    key: PatternKey
    entries: list[JournalEntry] = field(default_factory=list)

    def _with_outcome(self, outcome: Outcome) -> list[JournalEntry]:
        return [e for e in self.entries if e.outcome is outcome]

    @property
    def winners(self) -> list[JournalEntry]:
        return self._with_outcome(Outcome.WIN)

    @property
    def losers(self) -> list[JournalEntry]:
        return self._with_outcome(Outcome.LOSS)

    @property
    def occurrences(self) -> int:
        return len(self.entries)

    @property
    def wins(self) -> int:
        return len(self.winners)

    @property
    def losses(self) -> int:
        return len(self.losers)

    @property
    def breakevens(self) -> int:
        return len(self._with_outcome(Outcome.BREAKEVEN))

    @property
    def win_rr(self) -> float:
        """Total RR of winning trades."""
        return sum(e.rr_ratio or 0.0 for e in self.winners)

    @property
    def loss_rr(self) -> float:
        """Total RR of losing trades."""
        return sum(e.rr_ratio or 0.0 for e in self.losers)

    @property
    def confidence(self) -> float:
        return confidence_score(
            [e.rr_ratio for e in self.winners],
            [e.rr_ratio for e in self.losers],
        )


def group_entries(entries: Iterable[JournalEntry]) -> list[PatternGroup]:
    """Group entries by tag combination.

    Returns:
        Groups ordered by confidence, then occurrences, then key.
    """
    by_key: dict[PatternKey, list[JournalEntry]] = defaultdict(list)
    for entry in entries:
        by_key[PatternKey.from_entry(entry)].append(entry)

    groups = [PatternGroup(key=key, entries=items) for key, items in by_key.items()]
    groups.sort(key=lambda g: (-g.confidence, -g.occurrences, g.key.sort_key()))
    return groups


def _join(tags: Iterable[str]) -> str:
    return " + ".join(tags)


def _most_common_tags(entries: list[JournalEntry], attribute: str, limit: int = 2) -> list[str]:
    counts = Counter(tag for e in entries for tag in getattr(e, attribute))
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [tag for tag, _ in ranked[:limit]]


def _majority_direction(entries: list[JournalEntry]) -> Direction:
    counts = Counter(e.direction for e in entries)
    if counts[Direction.SHORT] > counts[Direction.LONG]:
        return Direction.SHORT
    return Direction.LONG


def _shared_psychology(entries: list[JournalEntry]) -> list[str]:
    """Psychology tags present on every one of at least two trades."""
    if len(entries) < 2:
        return []
    shared = set(entries[0].psychology)
    for entry in entries[1:]:
        shared &= set(entry.psychology)
    return sorted(shared)


def describe_strategy(group: PatternGroup) -> str:
    """Write an actionable strategy for a tag combination.

    Direction and take-profit come from the winning trades when there are
    any, otherwise from every trade in the group.
    """
    key = group.key
    basis = group.winners or group.entries
    direction = _majority_direction(basis)

    idea = (
        f"{direction.value}: consider a {key.entry_type} entry on a "
        f"{_join(sorted(key.reaction_to_poi))} reaction from the {_join(sorted(key.poi))}"
    )
    if key.premarket_condition:
        idea += f" after a {_join(sorted(key.premarket_condition))} premarket"
    parts = [idea + "."]

    tp_tags = _most_common_tags(basis, "tp")
    if tp_tags:
        parts.append(f"Take profit at {' or '.join(tp_tags)}.")
    sl_tags = _most_common_tags(group.entries, "sl")
    if sl_tags:
        parts.append(f"Place the stop loss using {' or '.join(sl_tags)}.")

    record = f"Seen {group.occurrences} time(s): {group.wins}W / {group.losses}L / {group.breakevens}BE"
    if group.wins:
        record += f", average winning RR {group.win_rr / group.wins:.2f}R"
    parts.append(record + ".")

    calm = _shared_psychology(group.winners)
    if calm:
        parts.append(f"Winning trades were consistently tagged {', '.join(calm)}.")
    tilt = _shared_psychology(group.losers)
    if tilt:
        parts.append(f"Losing trades were consistently tagged {', '.join(tilt)}; watch for these states.")

    return " ".join(parts)


def select_example_trades(entries: Iterable[JournalEntry]) -> list[ExampleTrade]:
    """Order a group's trades as supporting examples.

    Wins come first (highest RR first), then breakevens, then losses.
    """
    rank = {Outcome.WIN: 0, Outcome.BREAKEVEN: 1, Outcome.LOSS: 2}
    ordered = sorted(
        entries,
        key=lambda e: (
            rank[e.outcome],
            -(e.rr_ratio or 0.0) if e.outcome is Outcome.WIN else 0.0,
            e.date,
        ),
    )
    return [
        ExampleTrade(date=e.date.isoformat(), outcome=e.outcome.value, rr_ratio=e.rr_ratio)
        for e in ordered
    ]


def to_strategy(group: PatternGroup) -> SuggestedStrategy:
    """Convert a group into a suggested strategy."""
    key = group.key
    return SuggestedStrategy(
        poi_combination=sorted(key.poi),
        reaction_to_poi_combination=sorted(key.reaction_to_poi),
        entry_type=key.entry_type,
        premarket_condition_combination=sorted(key.premarket_condition) or None,
        strategy=describe_strategy(group),
        confidence=group.confidence,
        example_trades=select_example_trades(group.entries),
    )


def analyze_patterns(entries: Iterable[JournalEntry]) -> list[SuggestedStrategy]:
    """Suggest a strategy for every tag combination in the journal.

    Returns:
        Strategies ordered by confidence. Empty when there are no entries.
    """
    return [to_strategy(group) for group in group_entries(entries)]


def matching_entries(strategy: SuggestedStrategy, entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Entries whose tags match a strategy's combination.

    The premarket combination is only compared when the strategy names one.
    """
    poi = set(strategy.poi_combination)
    reactions = set(strategy.reaction_to_poi_combination)
    premarket = set(strategy.premarket_condition_combination or [])
    return [
        e
        for e in entries
        if set(e.poi) == poi
        and set(e.reaction_to_poi) == reactions
        and e.entry_type == strategy.entry_type
        and (not premarket or set(e.premarket_condition) == premarket)
    ]


def score_strategy(strategy: SuggestedStrategy, entries: Iterable[JournalEntry]) -> Optional[float]:
    """Deterministic confidence for a strategy, or None if no entry matches it."""
    matches = matching_entries(strategy, entries)
    if not matches:
        return None
    return confidence_score(
        [e.rr_ratio for e in matches if e.outcome is Outcome.WIN],
        [e.rr_ratio for e in matches if e.outcome is Outcome.LOSS],
    )


def rescore_strategies(
    strategies: Iterable[SuggestedStrategy],
    entries: Iterable[JournalEntry],
) -> list[SuggestedStrategy]:
    """Replace each strategy's confidence with the deterministic score.

    Strategies that match no entry keep the confidence they came with.
    """
    entries = list(entries)
    rescored = []
    for strategy in strategies:
        score = score_strategy(strategy, entries)
        if score is not None:
            strategy = strategy.model_copy(update={"confidence": score})
        rescored.append(strategy)
    return rescored
