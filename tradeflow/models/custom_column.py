"""CustomColumn data model."""

from datetime import datetime

from pydantic import BaseModel, Field


class CustomColumn(BaseModel):
    """A globally defined extra field shown in the journal log."""

    id: str = Field(..., min_length=1, description="Column identifier")
    name: str = Field(..., min_length=1, description="Column name, unique")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    model_config = {"frozen": True}
