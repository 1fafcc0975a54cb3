"""Chart series models for the dashboard."""

from datetime import date as date_type

from pydantic import BaseModel, Field


class EquityPoint(BaseModel):
    """One point of the cumulative RR equity curve."""

    index: int = Field(..., ge=0, description="Trade number, 0 for the baseline")
    cumulative_rr: float = Field(..., description="Running RR total, rounded to 2 dp")
    date: date_type = Field(..., description="Trade date")
    label: str = Field(..., description="Display label")

    model_config = {"frozen": True}


class EquityCurve(BaseModel):
    """Equity curve points plus the size of the input it was built from."""

    points: list[EquityPoint] = Field(default_factory=list)
    entry_count: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        """No journal entries were supplied."""
        return self.entry_count == 0

    @property
    def insufficient_data(self) -> bool:
        """Only the baseline point exists, so there is nothing to plot."""
        return len(self.points) <= 1

    @property
    def final_rr(self) -> float:
        return self.points[-1].cumulative_rr if self.points else 0.0


class SessionSlice(BaseModel):
    """Trade count for one trading session."""

    label: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)
    color: str = Field(..., description="Color name derived from the label")

    model_config = {"frozen": True}


class SessionDistribution(BaseModel):
    """Per-session trade counts."""

    slices: list[SessionSlice] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def total(self) -> int:
        return sum(s.count for s in self.slices)

    def as_dict(self) -> dict[str, int]:
        """Return a mapping from session label to count."""
        return {s.label: s.count for s in self.slices}

    def percentage(self, label: str) -> float:
        """Share of trades taken in a session, 0-100."""
        total = self.total
        if total == 0:
            return 0.0
        return self.as_dict().get(label, 0) / total * 100
