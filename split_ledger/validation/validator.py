"""
Ledger Input Validation

DESIGN DECISION: Input is checked before any roster is touched, and every
problem is reported at once instead of failing on the first one.

ERRORS block the operation:
- Empty participant name
- Percentage and dollar amount both set on one participant
- Non-numeric, non-finite or out-of-range shares
- Bill amounts that are not a finite number above zero

WARNINGS are passed on but do not block:
- Fixed percentages that would add up to more than 100%

IMPORTANT: Validation NEVER silently fixes input.
"""

import math
from decimal import Decimal
from typing import Any, Optional

from split_ledger.models.validation import ValidationIssue, ValidationResult


MAX_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 500


def _is_number(value: Any) -> bool:
    # bool is an int subclass; True is not a bill amount
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class LedgerInputValidator:
    """Validates participant and bill input for the ledger."""

    def _check_share(
        self,
        field: str,
        value: Any,
        upper_bound: Optional[float],
    ) -> list[ValidationIssue]:
        """Check an optional percentage or dollar share."""
        if value is None:
            return []

        if not _is_number(value):
            return [ValidationIssue(
                field=field,
                issue_type="invalid_type",
                message=f"{field} must be a number",
                severity="error",
            )]

        number = float(value)
        if not math.isfinite(number):
            return [ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{field} must be a finite number",
                severity="error",
            )]

        if number < 0:
            return [ValidationIssue(
                field=field,
                issue_type="out_of_range",
                message=f"{field} cannot be negative",
                severity="error",
                suggested_fix="Leave it empty to make the participant flexible",
            )]

        if upper_bound is not None and number > upper_bound:
            return [ValidationIssue(
                field=field,
                issue_type="out_of_range",
                message=f"{field} cannot be more than {upper_bound:g}",
                severity="error",
            )]

        return []

    def validate_participant(
        self,
        name: Optional[str],
        percentage: Any = None,
        dollar_amount: Any = None,
        other_fixed_percentage: float = 0.0,
    ) -> ValidationResult:
        """
        Validate participant input.

        Args:
            name: Display name
            percentage: Optional fixed percentage (0-100)
            dollar_amount: Optional fixed dollar amount (>= 0)
            other_fixed_percentage: Sum of the fixed percentages of every
                other participant, used for the over-allocation warning

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Participant name is required",
                severity="error",
            ))
        elif len(name.strip()) > MAX_NAME_LENGTH:
            issues.append(ValidationIssue(
                field="name",
                issue_type="too_long",
                message=f"Participant name cannot be longer than {MAX_NAME_LENGTH} characters",
                severity="error",
            ))

        percentage_issues = self._check_share("percentage", percentage, 100.0)
        dollar_issues = self._check_share("dollar_amount", dollar_amount, None)
        issues.extend(percentage_issues)
        issues.extend(dollar_issues)

        # Only judge the combination once both values are individually sane
        if not percentage_issues and not dollar_issues:
            has_percentage = percentage is not None and float(percentage) > 0
            has_dollar = dollar_amount is not None and float(dollar_amount) > 0

            if has_percentage and has_dollar:
                issues.append(ValidationIssue(
                    field="allocation_mode",
                    issue_type="conflict",
                    message="A participant can have a fixed percentage or a fixed amount, not both",
                    severity="error",
                    suggested_fix="Clear one of the two values",
                ))
            elif has_percentage:
                projected = other_fixed_percentage + float(percentage)
                if projected > 100:
                    issues.append(ValidationIssue(
                        field="percentage",
                        issue_type="over_allocated",
                        message=f"Fixed percentages would add up to {projected:g}%",
                        severity="warning",
                        suggested_fix="Flexible participants will owe nothing until this is reduced",
                    ))

        return ValidationResult(issues=issues)

    def validate_bill(
        self,
        amount: Any,
        description: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate bill input.

        Args:
            amount: Bill total; must be a finite number above zero
            description: Optional free text

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        if amount is None:
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="missing",
                message="Bill amount is required",
                severity="error",
            ))
        elif not _is_number(amount):
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="invalid_type",
                message="Bill amount must be a number",
                severity="error",
            ))
        elif not math.isfinite(float(amount)):
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="invalid_value",
                message="Bill amount must be a finite number",
                severity="error",
            ))
        elif float(amount) <= 0:
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="invalid_value",
                message="Bill amount must be greater than zero",
                severity="error",
            ))

        if description is not None:
            if not isinstance(description, str):
                issues.append(ValidationIssue(
                    field="description",
                    issue_type="invalid_type",
                    message="Bill description must be text",
                    severity="error",
                ))
            elif len(description.strip()) > MAX_DESCRIPTION_LENGTH:
                issues.append(ValidationIssue(
                    field="description",
                    issue_type="too_long",
                    message=f"Bill description cannot be longer than {MAX_DESCRIPTION_LENGTH} characters",
                    severity="error",
                ))

        return ValidationResult(issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summarize a validation result for display."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following:")
            for issue in result.errors:
                lines.append(f"  - {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"    ({issue.suggested_fix})")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please note:")
            for warning in result.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines)
