"""Data models for TradeFlow."""

from tradeflow.models.analysis import (
    AIJournalEntry,
    ExampleTrade,
    PatternAnalysisOutput,
    SuggestedStrategy,
)
from tradeflow.models.charts import (
    EquityCurve,
    EquityPoint,
    SessionDistribution,
    SessionSlice,
)
from tradeflow.models.custom_column import CustomColumn
from tradeflow.models.journal import (
    Direction,
    JournalEntry,
    JournalEntryInput,
    Outcome,
    normalize_tags,
)
from tradeflow.models.settings import (
    FREE_INPUT_FIELDS,
    MULTI_SELECT_FIELDS,
    DefaultValue,
    FieldSettings,
    JournalField,
)

__all__ = [
    "AIJournalEntry",
    "CustomColumn",
    "DefaultValue",
    "Direction",
    "EquityCurve",
    "EquityPoint",
    "ExampleTrade",
    "FieldSettings",
    "FREE_INPUT_FIELDS",
    "JournalEntry",
    "JournalEntryInput",
    "JournalField",
    "MULTI_SELECT_FIELDS",
    "Outcome",
    "PatternAnalysisOutput",
    "SessionDistribution",
    "SessionSlice",
    "SuggestedStrategy",
    "normalize_tags",
]
