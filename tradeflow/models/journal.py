"""Journal entry data models."""

from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)


_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


class Direction(str, Enum):
    """Trade direction."""

    LONG = "Long"
    SHORT = "Short"


class Outcome(str, Enum):
    """Trade outcome."""

    WIN = "Win"
    LOSS = "Loss"
    BREAKEVEN = "Breakeven"


def normalize_tags(value: object) -> list[str]:
    """Normalize a raw tag value into a clean, de-duplicated list.

    A bare string becomes a one-element list. Items are stripped, blank
    items are dropped and duplicates removed keeping first occurrence.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    tags: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        item = item.strip()
        if item and item not in tags:
            tags.append(item)
    return tags


class _JournalFields(BaseModel):
    """Fields shared by the entry form and the stored entry."""

    pair: str = Field(..., min_length=1, description="Instrument pair (e.g., EUR/USD)")
    date: date_type = Field(..., description="Trade date")
    direction: Direction = Field(..., description="Long or Short")
    premarket_condition: list[str] = Field(..., min_length=1, description="Premarket condition tags")
    poi: list[str] = Field(..., min_length=1, description="Point of interest tags")
    reaction_to_poi: list[str] = Field(..., min_length=1, description="Reaction to POI tags")
    entry_type: str = Field(..., min_length=1, description="Entry execution type")
    session: str = Field(..., description="Trading session")
    psychology: list[str] = Field(default_factory=list, description="Psychology tags")
    outcome: Outcome = Field(..., description="Win, Loss or Breakeven")
    rr_ratio: Optional[float] = Field(
        default=None, gt=0, allow_inf_nan=False, description="Risk/reward ratio"
    )
    tradingview_chart_url: Optional[str] = Field(default=None, description="Chart reference URL")
    tp: list[str] = Field(..., min_length=1, description="Take profit reason tags")
    sl: list[str] = Field(..., min_length=1, description="Stop loss reason tags")
    custom_data: dict[str, str] = Field(default_factory=dict, description="Custom column values")

    @field_validator(
        "premarket_condition", "poi", "reaction_to_poi", "psychology", "tp", "sl",
        mode="before",
    )
    @classmethod
    def _clean_tags(cls, value: object) -> list[str]:
        return normalize_tags(value)

    @field_validator("pair", "entry_type", "session", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("tradingview_chart_url", mode="before")
    @classmethod
    def _check_url(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("Chart URL must be a string")
        value = value.strip()
        if not value:
            return None
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError:
            raise ValueError("Please enter a valid URL.") from None
        return value


class JournalEntryInput(_JournalFields):
    """Journal entry form data, validated before anything reaches the store."""

    session: str = Field(..., min_length=1, description="Trading session")


class JournalEntry(_JournalFields):
    """A stored journal entry, scoped to its owner."""

    id: str = Field(..., min_length=1, description="Entry identifier")
    owner: str = Field(..., min_length=1, description="Owner key")
    # Rows written before tag validation existed may carry empty lists.
    premarket_condition: list[str] = Field(default_factory=list, description="Premarket condition tags")
    poi: list[str] = Field(default_factory=list, description="Point of interest tags")
    reaction_to_poi: list[str] = Field(default_factory=list, description="Reaction to POI tags")
    tp: list[str] = Field(default_factory=list, description="Take profit reason tags")
    sl: list[str] = Field(default_factory=list, description="Stop loss reason tags")
    session: str = Field(default="", description="Trading session")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    model_config = {"frozen": True}

    def form_data(self) -> dict:
        """Return the editable fields, suitable for re-validating an edit."""
        return self.model_dump(exclude={"id", "owner", "created_at"})

    @property
    def search_text(self) -> str:
        """Lower-cased text of every field, used by the log search."""
        parts = [
            self.pair,
            self.direction.value,
            *self.premarket_condition,
            *self.poi,
            *self.reaction_to_poi,
            *self.tp,
            *self.sl,
            self.entry_type,
            self.session,
            *self.psychology,
            self.outcome.value,
            "" if self.rr_ratio is None else f"{self.rr_ratio:g}",
            self.tradingview_chart_url or "",
            *self.custom_data.values(),
        ]
        return " ".join(parts).lower()
