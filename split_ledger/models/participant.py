"""
Participant Models for Split Ledger

A participant is one person sharing the bills. Every participant carries
exactly one allocation mode:

- FixedPercentage: always owes a set share of the total
- FixedDollar: always owes a set amount
- Flexible: splits whatever is left, evenly with the other flexible participants

DESIGN DECISION: The allocation mode is a tagged union rather than two
optional fields. A participant with both a percentage and a dollar amount
cannot be constructed.
"""

from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class FixedPercentage(BaseModel):
    """Participant owes a fixed percentage of the total."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed_percentage"] = "fixed_percentage"
    value: float = Field(
        ...,
        ge=0,
        le=100,
        allow_inf_nan=False,
        description="Share of the total, in percent"
    )


class FixedDollar(BaseModel):
    """Participant owes a fixed amount regardless of the total."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed_dollar"] = "fixed_dollar"
    value: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount owed"
    )


class Flexible(BaseModel):
    """Participant splits the remainder evenly with other flexible participants."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["flexible"] = "flexible"


AllocationMode = Annotated[
    Union[FixedPercentage, FixedDollar, Flexible],
    Field(discriminator="kind"),
]


def classify_allocation_mode(
    percentage: Optional[float] = None,
    dollar_amount: Optional[float] = None,
) -> Union[FixedPercentage, FixedDollar, Flexible]:
    """
    Pick the allocation mode from the optional share values.

    Whichever value is positive wins. Zero or missing values mean flexible.
    Callers are expected to have rejected the case where both are positive.
    """
    if percentage is not None and percentage > 0:
        return FixedPercentage(value=percentage)
    if dollar_amount is not None and dollar_amount > 0:
        return FixedDollar(value=dollar_amount)
    return Flexible()


def new_id() -> str:
    """Generate an id for a new participant or bill."""
    return str(uuid4())


class Participant(BaseModel):
    """
    A person sharing the bills.

    The roster is owned by the ledger; participants are replaced, never
    edited field by field, so the id survives updates.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque participant ID, unique within the roster"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    allocation_mode: AllocationMode = Field(
        default_factory=Flexible,
        description="How this participant's share is computed"
    )

    @property
    def percentage(self) -> Optional[float]:
        if isinstance(self.allocation_mode, FixedPercentage):
            return self.allocation_mode.value
        return None

    @property
    def dollar_amount(self) -> Optional[float]:
        if isinstance(self.allocation_mode, FixedDollar):
            return self.allocation_mode.value
        return None

    @property
    def has_fixed_percentage(self) -> bool:
        return isinstance(self.allocation_mode, FixedPercentage)

    @property
    def has_fixed_dollar_amount(self) -> bool:
        return isinstance(self.allocation_mode, FixedDollar)

    @property
    def is_flexible(self) -> bool:
        return isinstance(self.allocation_mode, Flexible)
