"""
Split Calculation

Splits a total across the participant roster:

1. Fixed-percentage participants owe their percentage of the total.
2. Fixed-dollar participants owe their amount.
3. Whatever is left (never less than zero) is shared evenly by the
   flexible participants.

The same calculation serves a single bill and the aggregate of all bills.
Amounts are not rounded here; rounding for display is the caller's job.
"""

from typing import Iterable

from split_ledger.models.allocation import AllocationLine, AllocationResult
from split_ledger.models.participant import (
    FixedDollar,
    FixedPercentage,
    Flexible,
    Participant,
)


def total_fixed_percentage(participants: Iterable[Participant]) -> float:
    """Sum of fixed percentages. Not clamped; may exceed 100."""
    return sum(
        p.allocation_mode.value
        for p in participants
        if isinstance(p.allocation_mode, FixedPercentage)
    )


def total_fixed_dollar(participants: Iterable[Participant]) -> float:
    """Sum of fixed dollar amounts."""
    return sum(
        p.allocation_mode.value
        for p in participants
        if isinstance(p.allocation_mode, FixedDollar)
    )


def _share_of(amount: float, total: float) -> float:
    return (amount / total) * 100 if total > 0 else 0.0


def calculate_split(
    participants: list[Participant],
    total_amount: float,
) -> AllocationResult:
    """
    Split a total across the roster.

    Args:
        participants: The roster, in insertion order
        total_amount: The total to split (>= 0)

    Returns:
        AllocationResult with one line per participant, in roster order
    """
    fixed_percentage = total_fixed_percentage(participants)
    amount_from_percentage = total_amount * fixed_percentage / 100
    fixed_dollar = total_fixed_dollar(participants)

    unallocated = total_amount - fixed_dollar - amount_from_percentage
    remaining = max(0.0, unallocated)

    flexible_count = sum(1 for p in participants if isinstance(p.allocation_mode, Flexible))
    per_flexible = remaining / flexible_count if flexible_count > 0 else 0.0

    lines = []
    for participant in participants:
        mode = participant.allocation_mode
        if isinstance(mode, FixedPercentage):
            amount = total_amount * mode.value / 100
            effective = mode.value
        elif isinstance(mode, FixedDollar):
            amount = mode.value
            effective = _share_of(mode.value, total_amount)
        else:
            amount = per_flexible
            effective = _share_of(per_flexible, total_amount)

        lines.append(AllocationLine(
            participant_id=participant.id,
            participant_name=participant.name,
            amount=amount,
            effective_percentage=effective,
        ))

    return AllocationResult(
        total_amount=total_amount,
        lines=lines,
        total_fixed_percentage=fixed_percentage,
        amount_from_percentage=amount_from_percentage,
        total_fixed_dollar=fixed_dollar,
        unallocated_amount=unallocated,
        remaining=remaining,
        per_flexible_amount=per_flexible,
    )
