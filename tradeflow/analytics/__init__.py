"""Derived views over journal entries: equity curve, sessions, patterns and log filters."""

from tradeflow.analytics.equity import build_equity_curve, rr_contribution
from tradeflow.analytics.log import filter_entries, unique_outcomes, unique_pairs
from tradeflow.analytics.patterns import (
    PRIOR,
    PatternGroup,
    PatternKey,
    analyze_patterns,
    confidence_score,
    group_entries,
    rescore_strategies,
    score_strategy,
)
from tradeflow.analytics.sessions import color_for_label, session_distribution

__all__ = [
    "PRIOR",
    "PatternGroup",
    "PatternKey",
    "analyze_patterns",
    "build_equity_curve",
    "color_for_label",
    "confidence_score",
    "filter_entries",
    "group_entries",
    "rescore_strategies",
    "rr_contribution",
    "score_strategy",
    "session_distribution",
    "unique_outcomes",
    "unique_pairs",
]
