"""Property-based tests for the pattern aggregation engine.

**Feature: trading-journal**
"""

from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from helpers import RR_VALUES, entry_strategy, make_entry
from tradeflow.analytics.patterns import (
    PRIOR,
    PatternKey,
    analyze_patterns,
    confidence_score,
    describe_strategy,
    group_entries,
    rescore_strategies,
    score_strategy,
    select_example_trades,
)
from tradeflow.models import Direction, Outcome, SuggestedStrategy


rr_lists = st.lists(st.one_of(st.none(), st.sampled_from(RR_VALUES)), max_size=10)


class TestConfidenceScore:
    """
    **Feature: trading-journal, Property 17: Confidence Monotonicity**

    *For any* pattern, one more win with the same RR distribution gives a
    strictly higher confidence; one more loss never raises it.
    """

    @given(wins=rr_lists, losses=rr_lists, extra=st.one_of(st.none(), st.sampled_from(RR_VALUES)))
    @settings(max_examples=200)
    def test_more_wins_strictly_higher(self, wins, losses, extra):
        """*For any* record, adding a win strictly increases confidence."""
        assert confidence_score(wins + [extra], losses) > confidence_score(wins, losses)

    @given(wins=rr_lists, losses=rr_lists, extra=st.one_of(st.none(), st.sampled_from(RR_VALUES)))
    @settings(max_examples=200)
    def test_more_losses_never_higher(self, wins, losses, extra):
        """*For any* record, adding a loss does not increase confidence."""
        assert confidence_score(wins, losses + [extra]) <= confidence_score(wins, losses)

    @given(wins=rr_lists, losses=rr_lists)
    @settings(max_examples=200)
    def test_bounded(self, wins, losses):
        """*For any* record, 0 <= confidence < 1."""
        assert 0 <= confidence_score(wins, losses) < 1

    def test_higher_rr_wins_score_higher(self):
        assert confidence_score([3.0]) > confidence_score([1.0])

    def test_known_values(self):
        assert confidence_score([]) == 0
        assert confidence_score([2.0]) == pytest.approx(3 / (3 + PRIOR))
        assert confidence_score([2.0], [1.0]) == pytest.approx(3 / 7)


class TestGrouping:
    """
    **Feature: trading-journal, Property 18: Tag Order Independence**

    *For any* entries, grouping ignores tag order and every combination
    seen at least once becomes a group.
    """

    def test_tag_order_ignored(self):
        entries = [
            make_entry(poi=["Order Block", "Fair Value Gap"]),
            make_entry(poi=["Fair Value Gap", "Order Block"]),
        ]

        groups = group_entries(entries)

        assert len(groups) == 1
        assert groups[0].occurrences == 2

    def test_premarket_is_part_of_key(self):
        entries = [make_entry(premarket_condition=["Sweep"]), make_entry(premarket_condition=["Run"])]
        assert len(group_entries(entries)) == 2

    @given(entries=st.lists(entry_strategy(), max_size=30))
    @settings(max_examples=50)
    def test_every_combination_is_a_group(self, entries):
        """*For any* entries, the groups cover every entry and every key exactly once."""
        groups = group_entries(entries)

        assert sum(g.occurrences for g in groups) == len(entries)
        assert {g.key for g in groups} == {PatternKey.from_entry(e) for e in entries}
        for group in groups:
            assert group.wins + group.losses + group.breakevens == group.occurrences

    @given(entries=st.lists(entry_strategy(), max_size=30))
    @settings(max_examples=50)
    def test_ordered_by_confidence(self, entries):
        """*For any* entries, groups are sorted by confidence descending."""
        confidences = [g.confidence for g in group_entries(entries)]
        assert confidences == sorted(confidences, reverse=True)

    def test_breakevens_are_neutral(self):
        base = [make_entry(outcome=Outcome.WIN, rr_ratio=2), make_entry(outcome=Outcome.LOSS, rr_ratio=1)]
        with_breakeven = base + [make_entry(outcome=Outcome.BREAKEVEN, rr_ratio=None)]

        assert group_entries(with_breakeven)[0].confidence == group_entries(base)[0].confidence

    def test_rr_sums(self):
        group = group_entries([
            make_entry(outcome=Outcome.WIN, rr_ratio=2),
            make_entry(outcome=Outcome.WIN, rr_ratio=None),
            make_entry(outcome=Outcome.LOSS, rr_ratio=1.5),
        ])[0]

        assert group.win_rr == 2
        assert group.loss_rr == 1.5


class TestExampleTrades:
    def test_wins_then_breakevens_then_losses(self):
        entries = [
            make_entry(date=date(2024, 1, 1), outcome=Outcome.LOSS, rr_ratio=1),
            make_entry(date=date(2024, 1, 2), outcome=Outcome.WIN, rr_ratio=1),
            make_entry(date=date(2024, 1, 3), outcome=Outcome.BREAKEVEN, rr_ratio=None),
            make_entry(date=date(2024, 1, 4), outcome=Outcome.WIN, rr_ratio=3),
        ]

        examples = select_example_trades(entries)

        assert [(t.outcome, t.rr_ratio) for t in examples] == [
            ("Win", 3), ("Win", 1), ("Breakeven", None), ("Loss", 1),
        ]
        assert examples[0].date == "2024-01-04"


class TestStrategyText:
    def _group(self, *entries):
        return group_entries(entries)[0]

    def test_direction_from_winning_trades(self):
        group = self._group(
            make_entry(direction=Direction.SHORT, outcome=Outcome.WIN),
            make_entry(direction=Direction.SHORT, outcome=Outcome.WIN),
            make_entry(direction=Direction.LONG, outcome=Outcome.LOSS),
            make_entry(direction=Direction.LONG, outcome=Outcome.LOSS),
            make_entry(direction=Direction.LONG, outcome=Outcome.LOSS),
        )
        assert describe_strategy(group).startswith("Short")

    def test_direction_tie_is_long(self):
        group = self._group(
            make_entry(direction=Direction.SHORT, outcome=Outcome.WIN),
            make_entry(direction=Direction.LONG, outcome=Outcome.WIN),
        )
        assert describe_strategy(group).startswith("Long")

    def test_mentions_setup_and_exits(self):
        text = describe_strategy(self._group(make_entry(tp=["Liquidity"], sl=["Structure"])))

        assert "Limit entry" in text
        assert "Order Block" in text
        assert "Strong Rejection" in text
        assert "Sweep" in text
        assert "Take profit at Liquidity" in text
        assert "stop loss using Structure" in text

    def test_psychology_note_for_consistent_wins(self):
        group = self._group(
            make_entry(outcome=Outcome.WIN, psychology=["Disciplined", "Confident"]),
            make_entry(outcome=Outcome.WIN, psychology=["Disciplined"]),
        )
        text = describe_strategy(group)

        assert "Winning trades were consistently tagged Disciplined." in text
        assert "Confident" not in text

    def test_psychology_note_for_consistent_losses(self):
        group = self._group(
            make_entry(outcome=Outcome.LOSS, psychology=["FOMO"]),
            make_entry(outcome=Outcome.LOSS, psychology=["FOMO", "Greedy"]),
        )
        assert "Losing trades were consistently tagged FOMO" in describe_strategy(group)

    def test_no_psychology_note_for_single_trade(self):
        group = self._group(make_entry(outcome=Outcome.WIN, psychology=["Disciplined"]))
        assert "consistently" not in describe_strategy(group)


class TestAnalyzePatterns:
    """
    **Feature: trading-journal, Property 19: Deterministic Analysis**

    *For any* entries, the analysis result does not depend on input order.
    """

    def test_empty_input(self):
        assert analyze_patterns([]) == []

    @given(entries=st.lists(entry_strategy(), max_size=20), data=st.data())
    @settings(max_examples=50)
    def test_order_independent(self, entries, data):
        """*For any* permutation of the journal, the strategies are identical."""
        shuffled = data.draw(st.permutations(entries))
        assert analyze_patterns(shuffled) == analyze_patterns(entries)

    def test_single_occurrence_included(self):
        strategies = analyze_patterns([make_entry(outcome=Outcome.LOSS, rr_ratio=1)])

        assert len(strategies) == 1
        assert strategies[0].confidence == 0
        assert strategies[0].premarket_condition_combination == ["Sweep"]

    def test_best_pattern_first(self):
        entries = [
            make_entry(poi=["Trendline"], outcome=Outcome.LOSS, rr_ratio=1),
            make_entry(poi=["Order Block"], outcome=Outcome.WIN, rr_ratio=3),
            make_entry(poi=["Order Block"], outcome=Outcome.WIN, rr_ratio=2),
        ]

        strategies = analyze_patterns(entries)

        assert strategies[0].poi_combination == ["Order Block"]
        assert len(strategies[0].example_trades) == 2


class TestScoreStrategy:
    def _strategy(self, **overrides) -> SuggestedStrategy:
        data = {
            "poi_combination": ["Order Block"],
            "reaction_to_poi_combination": ["Strong Rejection"],
            "entry_type": "Limit",
            "premarket_condition_combination": None,
            "strategy": "Long it.",
            "confidence": 0.99,
            "example_trades": [],
        }
        data.update(overrides)
        return SuggestedStrategy(**data)

    def test_premarket_ignored_when_omitted(self):
        entries = [
            make_entry(premarket_condition=["Sweep"], outcome=Outcome.WIN, rr_ratio=2),
            make_entry(premarket_condition=["Run"], outcome=Outcome.LOSS, rr_ratio=1),
        ]

        assert score_strategy(self._strategy(), entries) == pytest.approx(3 / 7)
        assert score_strategy(
            self._strategy(premarket_condition_combination=["Sweep"]), entries
        ) == pytest.approx(3 / 5)

    def test_no_match_is_none(self):
        assert score_strategy(self._strategy(entry_type="Market"), [make_entry()]) is None

    def test_rescore_replaces_matching_confidence(self):
        matched, unmatched = rescore_strategies(
            [self._strategy(), self._strategy(entry_type="Stop", confidence=0.4)],
            [make_entry(outcome=Outcome.WIN, rr_ratio=2)],
        )

        assert matched.confidence == pytest.approx(0.6)
        assert unmatched.confidence == 0.4
