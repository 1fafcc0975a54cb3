"""Per-owner field settings models."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class JournalField(str, Enum):
    """Fields of the journal entry form."""

    PAIR = "pair"
    DATE = "date"
    TYPE = "type"
    PREMARKET_CONDITION = "premarketCondition"
    POI = "poi"
    REACTION_TO_POI = "reactionToPoi"
    ENTRY_TYPE = "entryType"
    SESSION = "session"
    PSYCHOLOGY = "psychology"
    OUTCOME = "outcome"
    RR_RATIO = "rrRatio"
    TRADINGVIEW_CHART_URL = "tradingviewChartUrl"
    TP = "tp"
    SL = "sl"

    @property
    def is_multi_select(self) -> bool:
        """Whether the field holds a list of tags."""
        return self in MULTI_SELECT_FIELDS

    @property
    def has_vocabulary(self) -> bool:
        """Whether the field has a list of selectable options."""
        return self not in FREE_INPUT_FIELDS and self is not JournalField.DATE


MULTI_SELECT_FIELDS = frozenset({
    JournalField.POI,
    JournalField.REACTION_TO_POI,
    JournalField.PSYCHOLOGY,
    JournalField.TP,
    JournalField.SL,
    JournalField.PREMARKET_CONDITION,
})

FREE_INPUT_FIELDS = frozenset({
    JournalField.RR_RATIO,
    JournalField.TRADINGVIEW_CHART_URL,
})


DefaultValue = Union[str, list[str], float]


class FieldSettings(BaseModel):
    """Stored vocabulary and default value for one (owner, field) pair."""

    owner: str = Field(..., min_length=1, description="Owner key")
    field: JournalField = Field(..., description="Journal field")
    options: Optional[list[str]] = Field(
        default=None, description="Selectable values, None until seeded"
    )
    default: Optional[DefaultValue] = Field(
        default=None, description="Value pre-filled into the entry form"
    )

    model_config = {"frozen": True}
