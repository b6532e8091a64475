from typing import Optional

from pydantic import BaseModel, Field


class ScoringSettings(BaseModel):
    """Operator-tunable auto-action thresholds."""

    auto_approve_below: int = Field(ge=0, le=100)
    auto_block_above: int = Field(ge=0, le=100)


class ScoringSettingsUpdate(BaseModel):
    auto_approve_below: Optional[int] = Field(default=None, ge=0, le=100)
    auto_block_above: Optional[int] = Field(default=None, ge=0, le=100)
