"""
Allocation Models for Split Ledger

These are DERIVED values. They are recomputed from the current roster and
bills on every query and are never persisted.
"""

from pydantic import BaseModel, Field


class AllocationLine(BaseModel):
    """What one participant owes for a given total."""

    participant_id: str
    participant_name: str
    amount: float = Field(
        ...,
        description="Amount owed (unrounded)"
    )
    effective_percentage: float = Field(
        ...,
        description="Amount as a percentage of the total"
    )


class AllocationResult(BaseModel):
    """
    Result of splitting a total across the roster.

    Carries the intermediate quantities of the split so callers can
    explain the numbers, and the warning flags the UI surfaces.
    """

    total_amount: float = Field(
        ...,
        ge=0,
        description="The total being split"
    )
    lines: list[AllocationLine] = Field(
        default_factory=list,
        description="One line per participant, in roster order"
    )

    total_fixed_percentage: float = 0.0
    amount_from_percentage: float = 0.0
    total_fixed_dollar: float = 0.0
    unallocated_amount: float = Field(
        default=0.0,
        description="Total minus fixed allocations, before clamping (may be negative)"
    )
    remaining: float = Field(
        default=0.0,
        ge=0,
        description="Amount left for flexible participants"
    )
    per_flexible_amount: float = 0.0

    @property
    def is_percentage_over_allocated(self) -> bool:
        """Fixed percentages add up to more than 100%."""
        return self.total_fixed_percentage > 100

    @property
    def fixed_exceeds_total(self) -> bool:
        """Fixed percentages and fixed amounts together exceed the total."""
        return self.unallocated_amount < 0

    @property
    def has_warnings(self) -> bool:
        return self.is_percentage_over_allocated or self.fixed_exceeds_total

    @property
    def warnings(self) -> list[str]:
        """Human-readable warnings for the UI."""
        messages = []
        if self.is_percentage_over_allocated:
            messages.append(
                f"Fixed percentages add up to {self.total_fixed_percentage:g}%, "
                "which is more than 100%"
            )
        if self.fixed_exceeds_total:
            messages.append(
                f"Fixed allocations exceed the total by {-self.unallocated_amount:.2f}"
            )
        return messages

    @property
    def allocated_amount(self) -> float:
        """Sum of all participants' amounts."""
        return sum(line.amount for line in self.lines)
