"""Models for AI pattern analysis input and output.

Field aliases follow the camelCase names of the structured output schema
the language model is asked to produce.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AIJournalEntry(BaseModel):
    """A journal entry as presented to the language model."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    pair: str
    date: str = Field(..., description="Trade date (YYYY-MM-DD)")
    type: str = Field(..., description="Long or Short")
    premarket_condition: list[str] = Field(..., alias="premarketCondition")
    poi: list[str]
    reaction_to_poi: list[str] = Field(..., alias="reactionToPoi")
    entry_type: str = Field(..., alias="entryType")
    session: str
    psychology: list[str] = Field(default_factory=list)
    outcome: str
    rr_ratio: Optional[float] = Field(default=None, alias="rrRatio")
    tradingview_chart_url: Optional[str] = Field(default=None, alias="tradingviewChartUrl")
    tp: list[str] = Field(default_factory=list)
    sl: list[str] = Field(default_factory=list)


class ExampleTrade(BaseModel):
    """A trade cited as evidence for a suggested strategy."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: str = Field(..., description="The date of the example trade.")
    outcome: str = Field(..., description="The outcome of the example trade.")
    rr_ratio: Optional[float] = Field(
        default=None,
        alias="rrRatio",
        description="The RR Ratio of the example trade, if available.",
    )


class SuggestedStrategy(BaseModel):
    """A strategy derived from one recurring tag combination."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    poi_combination: list[str] = Field(
        ...,
        alias="poiCombination",
        description="The specific Point of Interest (POI) combination.",
    )
    reaction_to_poi_combination: list[str] = Field(
        ...,
        alias="reactionToPoiCombination",
        description="The specific Reaction to Point of Interest (POI) combination.",
    )
    entry_type: str = Field(
        ...,
        alias="entryType",
        description="The entry type most commonly or effectively associated with this pattern.",
    )
    premarket_condition_combination: Optional[list[str]] = Field(
        default=None,
        alias="premarketConditionCombination",
        description="The Premarket Condition(s) combination, if a strong factor in the pattern.",
    )
    strategy: str = Field(
        ...,
        description=(
            "A detailed, actionable trading strategy including trade direction (Long/Short), "
            "an entry idea aligned with the entry type, and key TP and SL considerations."
        ),
    )
    confidence: float = Field(
        ...,
        ge=0,
        le=1,
        description="Confidence score (0-1); higher when supported by multiple wins with good RR.",
    )
    example_trades: list[ExampleTrade] = Field(
        ...,
        alias="exampleTrades",
        description="Example trades that demonstrate this strategy (preferably winning trades).",
    )


class PatternAnalysisOutput(BaseModel):
    """Structured output of the pattern analysis."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    suggested_strategies: list[SuggestedStrategy] = Field(
        ...,
        alias="suggestedStrategies",
        description="Suggested trading strategies based on recurring patterns.",
    )
