"""
Input Validation for the Agreement Pricing & Term Engine

Incomplete drafts are not errors. Values a user has actively entered wrong
are rejected with a ValueError carrying a clear message.
"""

from decimal import Decimal

from .dates import parse_date
from .models import CLAUSE_4_4, CURRENT_MONTH_PLUS_DAYS, NOTICE_RULES, AgreementInput, AgreementTerm, PricedLine


class InputValidator:
    """Validates agreement input according to business rules."""

    def validate(self, input_data: AgreementInput) -> None:
        """
        Draft-level checks. Raises ValueError if any check fails.
        """
        self._validate_lines("office_spaces", input_data.office_spaces)
        self._validate_lines("parking_spaces", input_data.parking_spaces)
        self._validate_lines("services", input_data.services)
        self._validate_overrides(input_data)
        self._validate_term(input_data.term)

    def validate_for_save(self, input_data: AgreementInput) -> None:
        """
        Save-boundary checks: draft checks plus completeness.
        """
        self.validate(input_data)
        term = input_data.term

        start = parse_date(term.start_date)
        if start is None:
            raise ValueError("start_date is required")

        if term.has_fixed_term:
            end = parse_date(term.first_fixed_term_end_date)
            if end is None:
                raise ValueError("first_fixed_term_end_date is required when has_fixed_term=True")
            if end < start:
                raise ValueError(
                    f"first_fixed_term_end_date ({term.first_fixed_term_end_date}) "
                    f"cannot be before start_date ({term.start_date})"
                )

        if term.continuous_notice_rule == CURRENT_MONTH_PLUS_DAYS and term.continuous_notice_days is None:
            raise ValueError(f"continuous_notice_days is required when continuous_notice_rule='{CURRENT_MONTH_PLUS_DAYS}'")

    def _validate_lines(self, kind: str, lines: list[PricedLine]) -> None:
        for i, line in enumerate(lines):
            if line.list_price < 0:
                raise ValueError(f"{kind}[{i}] list_price cannot be negative, got: {line.list_price}")
            if line.quantity < 1:
                raise ValueError(f"{kind}[{i}] quantity must be at least 1, got: {line.quantity}")
            self._validate_percentage(f"{kind}[{i}] discount_percentage", line.discount_percentage)
            self._validate_percentage(f"{kind}[{i}] special_discount_percentage", line.special_discount_percentage)

    @staticmethod
    def _validate_percentage(name: str, value: Decimal) -> None:
        if not (0 <= value <= 100):
            raise ValueError(f"{name} must be between 0 and 100, got: {value}")

    def _validate_overrides(self, input_data: AgreementInput) -> None:
        for name, value in vars(input_data.overrides).items():
            if value is not None and value < 0:
                raise ValueError(f"{name}_override cannot be negative, got: {value}")

    def _validate_term(self, term: AgreementTerm) -> None:
        for name in ("start_date", "first_fixed_term_end_date", "continuous_term_start_date"):
            value = getattr(term, name)
            try:
                parse_date(value)
            except ValueError:
                raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got: {value}") from None

        if term.continuous_notice_rule not in NOTICE_RULES:
            raise ValueError(
                f"Invalid continuous_notice_rule: {term.continuous_notice_rule}. "
                f"Must be '{CLAUSE_4_4}' or '{CURRENT_MONTH_PLUS_DAYS}'"
            )

        days = term.continuous_notice_days
        if term.continuous_notice_rule == CURRENT_MONTH_PLUS_DAYS:
            if days is not None and days < 0:
                raise ValueError(f"continuous_notice_days cannot be negative, got: {days}")
        elif days is not None:
            raise ValueError(f"continuous_notice_days must be empty when continuous_notice_rule='{CLAUSE_4_4}'")
