"""
Bill Model for Split Ledger

A bill is a single recorded expense. Bills carry no per-bill roster:
every bill is split across the one shared participant roster.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from split_ledger.models.participant import new_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Bill(BaseModel):
    """
    A recorded expense.

    Bills are immutable once created; to change one, remove it and add
    a new one. New bills must be positive (enforced on add); a stored
    zero-amount bill still loads and splits to all-zero amounts.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque bill ID"
    )
    total_amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Total amount of the bill"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="What the bill was for"
    )
    created_at: datetime = Field(
        default_factory=_utc_now,
        description="When the bill was recorded (UTC)"
    )
