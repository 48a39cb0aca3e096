"""
Output Builder

Constructs the final response from the pricing context. Money leaves the
engine as plain integers, dates as ISO strings.
"""

from decimal import Decimal

from .calculators.pricing import to_units
from .models import AgreementResult, LinePrice, OverridableFigure, PricingContext


def to_number(value: Decimal) -> int | float:
    """Percentages keep their fraction only when they have one."""
    return int(value) if value == value.to_integral_value() else float(value)


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: PricingContext) -> AgreementResult:
        """Construct the complete agreement result from processing context."""
        return AgreementResult(
            line_items=self._build_line_items(ctx),
            totals=self._build_totals(ctx),
            term=self._build_term(ctx),
            credits=self._build_credits(ctx),
            security_deposits=self._build_deposits(ctx),
            stored_fields=self._build_stored_fields(ctx),
        )

    def _build_line_items(self, ctx: PricingContext) -> dict:
        lines = ctx.lines
        return {
            "office_spaces": [self._line(p) for p in lines.office_spaces],
            "parking_spaces": [self._line(p) for p in lines.parking_spaces],
            "services": [self._line(p) for p in lines.services],
        }

    @staticmethod
    def _line(priced: LinePrice) -> dict:
        line = {
            "list_price": to_units(priced.list_price),
            "quantity": priced.quantity,
            "total_discount_percentage": to_number(priced.total_discount_percentage),
            "final_price": to_units(priced.final_price),
        }
        if priced.office_id is not None:
            line["office_id"] = priced.office_id
        return line

    def _build_totals(self, ctx: PricingContext) -> dict:
        totals = ctx.totals
        return {
            "office_fees_fixed": to_units(totals.office_fees_fixed),
            "parking_fees": to_units(totals.parking_fees),
            "service_fees": to_units(totals.service_fees),
            "monthly_payment_fixed": to_units(totals.monthly_payment_fixed),
            "office_fees_continuous": to_units(totals.office_fees_continuous),
        }

    def _build_term(self, ctx: PricingContext) -> dict:
        term = ctx.term
        return {
            "has_fixed_term": term.has_fixed_term,
            "continuous_term_start_date": term.continuous_start_date,
            "fixed_term_duration": (
                {"months": term.duration_months, "days": term.duration_days}
                if term.duration_months is not None else None
            ),
            "fixed_term_notice": ctx.agreement.term.fixed_term_notice(),
        }

    def _build_credits(self, ctx: PricingContext) -> dict:
        credits = ctx.credits
        return {
            "conference_room": self._figure(credits.conference_room),
            "print_bw": self._figure(credits.print_bw),
            "print_color": self._figure(credits.print_color),
            "missing_office_ids": list(ctx.credit_totals.missing_office_ids),
        }

    def _build_deposits(self, ctx: PricingContext) -> dict:
        deposits = ctx.deposits
        return {
            "fixed": self._figure(deposits.fixed),
            "continuous": self._figure(deposits.continuous),
        }

    @staticmethod
    def _figure(figure: OverridableFigure) -> dict:
        return {
            "calculated": figure.calculated,
            "override": figure.override,
            "effective": figure.effective,
            "is_overridden": figure.is_overridden,
        }

    def _build_stored_fields(self, ctx: PricingContext) -> dict:
        """Derived agreement columns the host persists."""
        term = ctx.term
        credits = ctx.credits
        deposits = ctx.deposits
        return {
            "first_fixed_term_duration": term.duration_months,
            "continuous_term_start_date": term.continuous_start_date,
            "conference_room_credits": credits.conference_room.effective,
            "conference_room_credits_override": credits.conference_room.override,
            "print_credits_bw": credits.print_bw.effective,
            "print_credits_bw_override": credits.print_bw.override,
            "print_credits_color": credits.print_color.effective,
            "print_credits_color_override": credits.print_color.override,
            "security_deposit_fixed": deposits.fixed.effective,
            "security_deposit_fixed_override": deposits.fixed.override,
            "security_deposit_continuous": deposits.continuous.effective,
            "security_deposit_continuous_override": deposits.continuous.override,
        }
